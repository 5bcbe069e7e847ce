"""Shaping transforms: projection, first item, image normalization."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any

from contextspine.framework.params import ParamDef
from contextspine.framework.registry import TransformAction, register_transform
from contextspine.framework.transforms.base import MISSING, as_records, get_path, pick_paths

# (url path, node path) pairs tried in order; a None node path means the
# url has no sibling width/height.
IMAGE_CANDIDATES: dict[str, list[tuple[str, str | None]]] = {
    "heroImage": [
        ("image.url", "image"),
        ("images.hero.full.url", "images.hero.full"),
        ("images.hero.url", "images.hero"),
        ("image", None),
    ],
    "heroLink": [
        ("image.link", "image"),
        ("images.hero.link", "images.hero"),
        ("image-link", None),
    ],
    "thumbImage": [
        ("image.url", "image"),
        ("images.hero.thumb.url", "images.hero.thumb"),
        ("thumb", None),
        ("image", None),
        ("images.hero.url", "images.hero"),
        ("images.hero.full.url", "images.hero.full"),
    ],
}

# Fields whose value is the bare url rather than an image node.
URL_ONLY_FIELDS = {"heroLink"}


@register_transform(
    TransformAction.PROJECT,
    params=[
        ParamDef("fields", list, "Dot paths to keep", default=[]),
        ParamDef("removeEmpty", bool, "Drop records left empty", default=True),
    ],
)
def project(items: Any, *, fields: list[str], removeEmpty: bool) -> Any:
    """Keep only the named fields of each record."""
    records, was_list = as_records(items)
    projected = [
        pick_paths(record, fields) if isinstance(record, Mapping) else {}
        for record in records
    ]
    if removeEmpty:
        projected = [record for record in projected if record]
    if was_list:
        return projected
    return projected[0] if projected else {}


@register_transform(
    TransformAction.FIRST_ITEM,
    params=[ParamDef("default", object, "Returned when there is no item", default={}, nullable=True)],
)
def first_item(items: Any, *, default: Any) -> Any:
    """First element of a list, or the value itself when it is not a list."""
    if isinstance(items, list):
        return items[0] if items else default
    return items if items is not None else default


def _find_image(record: Mapping[str, Any], url_path: str, node_path: str | None) -> dict | None:
    url = get_path(record, url_path)
    if not isinstance(url, str) or not url:
        return None
    node = get_path(record, node_path, MISSING) if node_path else {}
    if not isinstance(node, Mapping):
        return None
    image: dict[str, Any] = {"url": url}
    for key in ("width", "height"):
        if node.get(key):
            image[key] = copy.deepcopy(node[key])
    return image


@register_transform(
    TransformAction.NORMALIZE_IMAGES,
    params=[
        ParamDef(
            "fields",
            list,
            "Image fields to synthesize",
            default=["heroImage", "heroLink", "thumbImage"],
        )
    ],
)
def normalize_images(items: Any, *, fields: list[str]) -> Any:
    """Synthesize ``heroImage``, ``heroLink`` and ``thumbImage`` from known layouts."""
    records, was_list = as_records(items)
    result = []
    for record in records:
        if not isinstance(record, Mapping):
            result.append(record)
            continue
        updated = dict(record)
        for name in fields:
            if updated.get(name) or name not in IMAGE_CANDIDATES:
                continue
            for url_path, node_path in IMAGE_CANDIDATES[name]:
                image = _find_image(record, url_path, node_path)
                if image is not None:
                    updated[name] = image["url"] if name in URL_ONLY_FIELDS else image
                    break
        result.append(updated)
    return result if was_list else result[0]
