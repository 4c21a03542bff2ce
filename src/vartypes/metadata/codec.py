"""Embedded metadata block encoding and decoding.

Every generated artifact carries a trailing block like::

    /* DO NOT REMOVE -- START VARIABLE OBJECT INFO -- DO NOT REMOVE **
    {
        "name": "Float",
        "type": "float",
        "referability": "Struct",
        "menuOrder": 350002,
        "builtin": true
    }
    ** DO NOT REMOVE --  END VARIABLE OBJECT INFO  -- DO NOT REMOVE */

Decoding matches by field name, so the keys below must never be renamed
without rewriting every previously generated artifact.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from vartypes.metadata.descriptor import (
    DEFAULT_MENU_ORDER,
    Referability,
    TypeDescriptor,
)

DATA_HEADER = "/* DO NOT REMOVE -- START VARIABLE OBJECT INFO -- DO NOT REMOVE **"
DATA_FOOTER = "** DO NOT REMOVE --  END VARIABLE OBJECT INFO  -- DO NOT REMOVE */"

# Field names inside the block.
KEY_NAME = "name"
KEY_TYPE = "type"
KEY_REFERABILITY = "referability"
KEY_MENU_ORDER = "menuOrder"
KEY_BUILTIN = "builtin"

NEWLINE = "\n"


class MetadataParseError(Exception):
    """Raised when an embedded metadata block is missing or malformed."""

    def __init__(self, message: str, source: Path | str | None = None) -> None:
        self.source = source
        if source is not None:
            message = f"{source}: {message}"
        super().__init__(message)


def to_dict(descriptor: TypeDescriptor) -> dict[str, Any]:
    """Convert a descriptor to the flat object stored in the block."""
    return {
        KEY_NAME: descriptor.name,
        KEY_TYPE: descriptor.type_name,
        KEY_REFERABILITY: descriptor.referability.text,
        KEY_MENU_ORDER: descriptor.menu_order,
        KEY_BUILTIN: descriptor.builtin,
    }


def from_dict(data: dict[str, Any]) -> TypeDescriptor:
    """Create a descriptor from a parsed block object.

    ``name`` and ``type`` are required. ``menuOrder`` and ``builtin`` fall
    back to their defaults so that older artifacts still decode.
    """
    name = data.get(KEY_NAME)
    type_name = data.get(KEY_TYPE)
    if not isinstance(name, str):
        raise MetadataParseError(f"missing or invalid '{KEY_NAME}' field")
    if not isinstance(type_name, str):
        raise MetadataParseError(f"missing or invalid '{KEY_TYPE}' field")

    menu_order_raw = data.get(KEY_MENU_ORDER, DEFAULT_MENU_ORDER)
    if isinstance(menu_order_raw, bool) or not isinstance(menu_order_raw, int):
        raise MetadataParseError(
            f"invalid '{KEY_MENU_ORDER}' field: {menu_order_raw!r}"
        )

    builtin_raw = data.get(KEY_BUILTIN, False)
    if not isinstance(builtin_raw, bool):
        raise MetadataParseError(f"invalid '{KEY_BUILTIN}' field: {builtin_raw!r}")

    return TypeDescriptor(
        name=name,
        type_name=type_name,
        referability=Referability.parse(data.get(KEY_REFERABILITY)),
        menu_order=menu_order_raw,
        builtin=builtin_raw,
    )


def encode(descriptor: TypeDescriptor) -> str:
    """Encode a descriptor as a self-contained metadata block.

    The result ends with a newline so it can be appended to a file as is.
    """
    body = json.dumps(to_dict(descriptor), indent=4)
    return NEWLINE.join([DATA_HEADER, body, DATA_FOOTER]) + NEWLINE


def _extract_block(text: str) -> str:
    """Return the raw interior of the first header/footer pair."""
    lines = text.splitlines()
    start: int | None = None
    for index, line in enumerate(lines):
        if DATA_HEADER in line:
            start = index
            break
    if start is None:
        raise MetadataParseError("no metadata header found")

    for index in range(start + 1, len(lines)):
        if DATA_FOOTER in lines[index]:
            return NEWLINE.join(lines[start + 1 : index])

    raise MetadataParseError("metadata block is not terminated")


def decode(text: str) -> TypeDescriptor:
    """Decode the first metadata block found in ``text``.

    Blocks after the first are ignored. Unrecognised referability text
    decodes to ``Referability.UNKNOWN``.

    Raises:
        MetadataParseError: If no well-formed block is present.
    """
    raw = _extract_block(text)
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise MetadataParseError(f"metadata is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise MetadataParseError("metadata must be a JSON object")
    return from_dict(data)


def read_metadata(path: Path) -> TypeDescriptor:
    """Read and decode the metadata block of a file on disk."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise MetadataParseError(f"cannot read file: {e}", source=path) from e
    try:
        return decode(text)
    except MetadataParseError as e:
        raise MetadataParseError(str(e), source=path) from e


def strip_metadata(text: str) -> str:
    """Remove every complete metadata block from ``text``.

    An unterminated header is left in place.
    """
    out: list[str] = []
    pending: list[str] = []
    inside = False
    for line in text.splitlines(keepends=True):
        if not inside and DATA_HEADER in line:
            inside = True
            pending = [line]
        elif inside:
            pending.append(line)
            if DATA_FOOTER in line:
                inside = False
                pending = []
        else:
            out.append(line)
    out.extend(pending)
    return "".join(out)
