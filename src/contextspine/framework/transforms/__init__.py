"""Built-in transforms.

Importing this package registers every transform with
:mod:`contextspine.framework.registry`.

Architecture::

    base.py        dot-path helpers, label compression, group mapping
    dates.py       CalendarEvents, TimeAgo, TimeAgoInDays, DisplayDate,
                   ArticleDate, AddYearMonthHeadings
    grouping.py    GroupByDate, RemoveDuplicates, RemoveDuplicatesFromGroups
    ordering.py    Limit, Sort, SortEachGroup
    shaping.py     Project, FirstItem, NormalizeImages
"""

from contextspine.framework.transforms import dates, grouping, ordering, shaping

__all__ = ["dates", "grouping", "ordering", "shaping"]
