from __future__ import annotations

"""Icon and alias records stored in an icon set.

Records mirror the Iconify JSON icon format. Optional fields are None when
absent from the source data, so exporting a record writes back exactly the
fields it was given (minus values equal to their defaults).
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional, Union

__all__ = [
    "DEFAULT_DIMENSIONS",
    "DEFAULT_TRANSFORMATIONS",
    "ROTATION_PERIOD",
    "IconRecord",
    "AliasRecord",
    "ResolvedIcon",
    "IconEntry",
]

DEFAULT_DIMENSIONS: Dict[str, int] = {"left": 0, "top": 0, "width": 16, "height": 16}
DEFAULT_TRANSFORMATIONS: Dict[str, Any] = {"rotate": 0, "hFlip": False, "vFlip": False}

# Rotation is stored in quarter turns
ROTATION_PERIOD = 4

# Wire key -> attribute name
_BOX_FIELDS = {"left": "left", "top": "top", "width": "width", "height": "height"}
_TRANSFORM_FIELDS = {"rotate": "rotate", "hFlip": "h_flip", "vFlip": "v_flip"}
_OPTIONAL_FIELDS = {**_BOX_FIELDS, **_TRANSFORM_FIELDS, "hidden": "hidden"}


def _optional_fields(data: Mapping[str, Any]) -> Dict[str, Any]:
    return {attr: data[key] for key, attr in _OPTIONAL_FIELDS.items() if key in data}


def _extra_fields(data: Mapping[str, Any], known: set) -> Dict[str, Any]:
    return {k: v for k, v in data.items() if k not in known}


def _dump_optional(record: Any, defaults: Mapping[str, Any],
                   keep_visible: bool = False) -> Dict[str, Any]:
    result: Dict[str, Any] = {}
    for key, attr in _OPTIONAL_FIELDS.items():
        value = getattr(record, attr)
        if value is None:
            continue
        if key in defaults and value == defaults[key]:
            continue
        if key == "hidden" and not value and not keep_visible:
            continue
        result[key] = value
    return result


@dataclass
class IconRecord:
    """Real icon: owns a body plus optional box and transformations."""

    body: str
    left: Optional[float] = None
    top: Optional[float] = None
    width: Optional[float] = None
    height: Optional[float] = None
    rotate: Optional[int] = None
    h_flip: Optional[bool] = None
    v_flip: Optional[bool] = None
    hidden: Optional[bool] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "IconRecord":
        known = set(_OPTIONAL_FIELDS) | {"body"}
        return cls(
            body=str(data.get("body", "")),
            extra=_extra_fields(data, known),
            **_optional_fields(data),
        )

    def to_dict(self, defaults: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """Serialise to the wire format, omitting values equal to *defaults*."""
        if defaults is None:
            defaults = {**DEFAULT_DIMENSIONS, **DEFAULT_TRANSFORMATIONS}
        result: Dict[str, Any] = {"body": self.body}
        result.update(_dump_optional(self, defaults))
        result.update(self.extra)
        return result


@dataclass
class AliasRecord:
    """Named pointer to another icon or alias with optional overrides.

    An alias with at least one box or transformation override is a
    *variation*.
    """

    parent: str
    left: Optional[float] = None
    top: Optional[float] = None
    width: Optional[float] = None
    height: Optional[float] = None
    rotate: Optional[int] = None
    h_flip: Optional[bool] = None
    v_flip: Optional[bool] = None
    hidden: Optional[bool] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AliasRecord":
        known = set(_OPTIONAL_FIELDS) | {"parent"}
        return cls(
            parent=str(data.get("parent", "")),
            extra=_extra_fields(data, known),
            **_optional_fields(data),
        )

    @property
    def is_variation(self) -> bool:
        attrs = list(_BOX_FIELDS.values()) + list(_TRANSFORM_FIELDS.values())
        return any(getattr(self, attr) is not None for attr in attrs)

    def to_dict(self) -> Dict[str, Any]:
        # Alias deltas are relative to the parent, so nothing counts as a default.
        # An explicit hidden=False overrides a hidden parent and must survive.
        result: Dict[str, Any] = {"parent": self.parent}
        result.update(_dump_optional(self, {}, keep_visible=True))
        result.update(self.extra)
        return result


IconEntry = Union[IconRecord, AliasRecord]


@dataclass(frozen=True)
class ResolvedIcon:
    """Icon data after following an alias chain, every field concrete.

    ``hidden`` is a storage concern and is not part of the resolved data.
    """

    body: str
    left: float = DEFAULT_DIMENSIONS["left"]
    top: float = DEFAULT_DIMENSIONS["top"]
    width: float = DEFAULT_DIMENSIONS["width"]
    height: float = DEFAULT_DIMENSIONS["height"]
    rotate: int = 0
    h_flip: bool = False
    v_flip: bool = False

    @classmethod
    def from_icon(cls, icon: IconRecord, defaults: Optional[Mapping[str, Any]] = None) -> "ResolvedIcon":
        box = {**DEFAULT_DIMENSIONS, **(defaults or {})}
        return cls(
            body=icon.body,
            left=box["left"] if icon.left is None else icon.left,
            top=box["top"] if icon.top is None else icon.top,
            width=box["width"] if icon.width is None else icon.width,
            height=box["height"] if icon.height is None else icon.height,
            rotate=(icon.rotate or 0) % ROTATION_PERIOD,
            h_flip=bool(icon.h_flip),
            v_flip=bool(icon.v_flip),
        )

    def merge_alias(self, alias: AliasRecord) -> "ResolvedIcon":
        """Apply alias overrides on top of this (parent) data.

        Box values are replaced, rotation is added and flips are toggled.
        """
        changes: Dict[str, Any] = {}
        for attr in _BOX_FIELDS.values():
            value = getattr(alias, attr)
            if value is not None:
                changes[attr] = value
        if alias.rotate:
            changes["rotate"] = (self.rotate + alias.rotate) % ROTATION_PERIOD
        if alias.h_flip:
            changes["h_flip"] = not self.h_flip
        if alias.v_flip:
            changes["v_flip"] = not self.v_flip
        return replace(self, **changes) if changes else self

    def to_dict(self, full: bool = False) -> Dict[str, Any]:
        """Serialise to the wire format.

        Values equal to the global defaults are omitted unless *full* is set.
        """
        result: Dict[str, Any] = {"body": self.body}
        values = {
            "left": self.left,
            "top": self.top,
            "width": self.width,
            "height": self.height,
            "rotate": self.rotate,
            "hFlip": self.h_flip,
            "vFlip": self.v_flip,
        }
        defaults = {**DEFAULT_DIMENSIONS, **DEFAULT_TRANSFORMATIONS}
        for key, value in values.items():
            if full or value != defaults[key]:
                result[key] = value
        return result
