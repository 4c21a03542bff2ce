"""Identifier checks for names and wrapped type references.

A name is valid when it can be used both as a C# type reference and as a
file name stem.
"""

from __future__ import annotations

import re

# Keywords that are also legal type references.
PRIMITIVE_ALIASES: frozenset[str] = frozenset(
    {
        "bool",
        "byte",
        "char",
        "decimal",
        "double",
        "float",
        "int",
        "long",
        "object",
        "sbyte",
        "short",
        "string",
        "uint",
        "ulong",
        "ushort",
    }
)

RESERVED_KEYWORDS: frozenset[str] = frozenset(
    {
        "abstract", "as", "base", "bool", "break", "byte", "case", "catch",
        "char", "checked", "class", "const", "continue", "decimal", "default",
        "delegate", "do", "double", "else", "enum", "event", "explicit",
        "extern", "false", "finally", "fixed", "float", "for", "foreach",
        "goto", "if", "implicit", "in", "int", "interface", "internal", "is",
        "lock", "long", "namespace", "new", "null", "object", "operator",
        "out", "override", "params", "private", "protected", "public",
        "readonly", "ref", "return", "sbyte", "sealed", "short", "sizeof",
        "stackalloc", "static", "string", "struct", "switch", "this", "throw",
        "true", "try", "typeof", "uint", "ulong", "unchecked", "unsafe",
        "ushort", "using", "virtual", "void", "volatile", "while",
    }
)  # fmt: skip

_IDENTIFIER_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_ARRAY_SUFFIX_RE = re.compile(r"(?:\[\])+")
_BASE_AND_SUFFIX_RE = re.compile(r"^(?P<base>[^\[\]]*)(?P<suffix>(?:\[\])*)$")


def is_plain_identifier(segment: str) -> bool:
    """True for a single identifier that is not a reserved keyword."""
    return (
        _IDENTIFIER_RE.fullmatch(segment) is not None
        and segment not in RESERVED_KEYWORDS
    )


def split_array_suffix(name: str) -> tuple[str, str] | None:
    """Split ``name`` into its base and trailing ``[]`` groups.

    Returns None when brackets appear anywhere but as trailing ``[]`` pairs.
    """
    match = _BASE_AND_SUFFIX_RE.match(name)
    if match is None:
        return None
    suffix = match.group("suffix")
    if suffix and _ARRAY_SUFFIX_RE.fullmatch(suffix) is None:
        return None
    return match.group("base"), suffix


def is_valid_name(name: str) -> bool:
    """Check whether ``name`` is usable as an identifier or type reference.

    Accepts primitive aliases (``int``), plain identifiers (``Meter``),
    dotted qualified names (``Some.Specific.Class``) and any of those with
    trailing array groups (``welp[][]``). Keywords, whitespace, empty
    segments, leading digits and other punctuation are rejected.
    """
    if not name:
        return False

    parts = split_array_suffix(name)
    if parts is None:
        return False
    base, _suffix = parts

    if base in PRIMITIVE_ALIASES:
        return True

    segments = base.split(".")
    return all(is_plain_identifier(segment) for segment in segments)
