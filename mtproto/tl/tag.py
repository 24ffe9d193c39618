"""Field tags that describe optional and flag-encoded TL fields."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any

from .errors import TLError

TAG_NAME = "tl"

_FLAG_PREFIX = "flag:"


@dataclass(frozen=True)
class FieldTag:
    """Parsed form of a field's ``tl`` tag."""

    index: int = 0
    encoded_in_bitflag: bool = False
    ignore: bool = False
    optional: bool = False


def parse_tag(tag: str | None) -> FieldTag | None:
    """Parse a tag such as ``"flag:2,encoded_in_bitflags"``; None means no tag."""
    if tag is None:
        return None

    name, *options = tag.split(",")
    if name == "-":
        return FieldTag(ignore=True)

    index = 0
    optional = False
    flag_index_set = False
    if name.startswith(_FLAG_PREFIX):
        num = name[len(_FLAG_PREFIX):]
        try:
            index = int(num)
        except ValueError as exc:
            raise TLError(f"parsing index number '{num}': {exc}") from exc
        optional = True
        flag_index_set = True

    encoded = False
    if "encoded_in_bitflags" in options:
        if not flag_index_set:
            raise TLError("have 'encoded_in_bitflag' option without flag index")
        encoded = True

    if "omitempty" in options:
        optional = True

    return FieldTag(index=index, encoded_in_bitflag=encoded, optional=optional)


def has_flag(cls: Any) -> bool:
    """Tell whether a dataclass has any field carrying a usable ``tl`` tag."""
    for f in dataclasses.fields(cls):
        if TAG_NAME not in f.metadata:
            continue
        try:
            info = parse_tag(f.metadata[TAG_NAME])
        except TLError:
            continue
        if info is not None and not info.ignore:
            return True
    return False