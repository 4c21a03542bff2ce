"""Type descriptor: the logical identity of one variable-type family."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

DEFAULT_MENU_ORDER = 350000


class Referability(Enum):
    """Whether the wrapped type is passed by value or by reference.

    Values are the canonical texts written into generated files and
    substituted for ``@Referable@`` in templates.
    """

    VALUE = "Struct"
    REFERENCE = "Class"
    UNKNOWN = "Unknown"

    @property
    def text(self) -> str:
        return self.value

    @classmethod
    def parse(cls, raw: object) -> Referability:
        """Parse referability text case-insensitively.

        Anything unrecognised maps to UNKNOWN rather than raising.
        """
        if isinstance(raw, Referability):
            return raw
        if not isinstance(raw, str):
            return cls.UNKNOWN
        return _REFERABILITY_ALIASES.get(raw.strip().lower(), cls.UNKNOWN)


_REFERABILITY_ALIASES: dict[str, Referability] = {
    "struct": Referability.VALUE,
    "value": Referability.VALUE,
    "class": Referability.REFERENCE,
    "reference": Referability.REFERENCE,
}

# Kinds a template may declare; UNKNOWN is never generated.
CONCRETE_REFERABILITIES: frozenset[Referability] = frozenset(
    {Referability.VALUE, Referability.REFERENCE}
)


@dataclass(frozen=True)
class TypeDescriptor:
    """Metadata describing one generated variable type.

    ``name`` is the human readable name used for the generated classes
    (``Meter`` -> ``MeterVariable``), ``type_name`` is the wrapped data type
    exactly as it would be written in code (``float``, ``Fruits.Orange``).
    """

    name: str
    type_name: str
    referability: Referability
    menu_order: int = DEFAULT_MENU_ORDER
    builtin: bool = False

    def with_changes(self, **changes: Any) -> TypeDescriptor:
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def __str__(self) -> str:
        return f"{self.name} ({self.type_name}, {self.referability.text})"
