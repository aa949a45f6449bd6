"""Attribute sets: opaque style key/value mappings.

Tinct never looks inside an attribute set. It only needs two operations:
freezing a mapping produced by a style function so it can be shared by
reference, and merging one set over another (override-union).

Example:
    >>> base = freeze_attributes({"color": "red", "font": "Body"})
    >>> dict(merge_attributes(base, {"color": "blue"}))
    {'color': 'blue', 'font': 'Body'}
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from tinct.errors import StyleError

type AttributeSet = Mapping[str, Any]

EMPTY_ATTRIBUTES: AttributeSet = MappingProxyType({})


def _wrap(attributes: dict[str, Any]) -> AttributeSet:
    # attributes must be a dict nothing else holds a reference to
    return MappingProxyType(attributes) if attributes else EMPTY_ATTRIBUTES


def freeze_attributes(attributes: Mapping[str, Any] | None) -> AttributeSet:
    """Return a read-only snapshot of attributes.

    The result never reflects later changes to the argument, even when the
    argument is itself a read-only proxy over someone else's dict. None
    becomes the shared empty set.

    Raises:
        StyleError: If attributes is not a mapping
    """
    if attributes is None or attributes is EMPTY_ATTRIBUTES:
        return EMPTY_ATTRIBUTES
    if not isinstance(attributes, Mapping):
        msg = f"attribute set must be a mapping, got {type(attributes).__name__}"
        raise StyleError(msg)
    return _wrap(dict(attributes))


def merge_attributes(*layers: Mapping[str, Any]) -> AttributeSet:
    """Merge attribute sets, later layers overriding earlier ones per key.

    Keys a layer does not define are left as the earlier layers set them.
    """
    merged: dict[str, Any] = {}
    for layer in layers:
        merged.update(layer)
    return _wrap(merged)
