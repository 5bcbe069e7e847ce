"""Frozen clock and epoch-millisecond constants shared by the suite."""

from datetime import UTC, datetime

FROZEN_NOW = datetime(2020, 7, 15, 17, 0, tzinfo=UTC)  # noon in America/Chicago

TS_TODAY = 1594825200000  # 2020-07-15T15:00:00Z
TS_YESTERDAY = 1594738800000  # 2020-07-14T15:00:00Z
TS_JUNE_20 = 1592665200000  # 2020-06-20T15:00:00Z
TS_MAY_1 = 1588345200000  # 2020-05-01T15:00:00Z
