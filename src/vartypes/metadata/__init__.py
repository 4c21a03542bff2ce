"""Type descriptors, their embedded encoding and identifier checks."""

from vartypes.metadata.codec import (
    DATA_FOOTER,
    DATA_HEADER,
    MetadataParseError,
    decode,
    encode,
    read_metadata,
    strip_metadata,
)
from vartypes.metadata.descriptor import (
    CONCRETE_REFERABILITIES,
    DEFAULT_MENU_ORDER,
    Referability,
    TypeDescriptor,
)
from vartypes.metadata.identifiers import PRIMITIVE_ALIASES, is_valid_name

__all__ = [
    "CONCRETE_REFERABILITIES",
    "DATA_FOOTER",
    "DATA_HEADER",
    "DEFAULT_MENU_ORDER",
    "MetadataParseError",
    "PRIMITIVE_ALIASES",
    "Referability",
    "TypeDescriptor",
    "decode",
    "encode",
    "is_valid_name",
    "read_metadata",
    "strip_metadata",
]
