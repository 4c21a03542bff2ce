"""Base template definition."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from vartypes.metadata.descriptor import (
    CONCRETE_REFERABILITIES,
    Referability,
    TypeDescriptor,
)

NAME_PLACEHOLDER = "@Name@"
TYPE_PLACEHOLDER = "@Type@"
REFERABLE_PLACEHOLDER = "@Referable@"
ORDER_PLACEHOLDER = "@Order@"


class Placement(Enum):
    """Which side of the tree a template's output belongs to."""

    RUNTIME_VISIBLE = "runtime"
    TOOL_ONLY = "tool"


def apply_placeholders(text: str, descriptor: TypeDescriptor) -> str:
    """Substitute the four template placeholders with descriptor values."""
    return (
        text.replace(NAME_PLACEHOLDER, descriptor.name)
        .replace(TYPE_PLACEHOLDER, descriptor.type_name)
        .replace(REFERABLE_PLACEHOLDER, descriptor.referability.text)
        .replace(ORDER_PLACEHOLDER, str(descriptor.menu_order))
    )


@dataclass(frozen=True)
class TemplateDescriptor:
    """Definition of one code template.

    ``name_pattern`` is the output file name with placeholders, e.g.
    ``@Name@Variable.cs``.
    """

    source: Path
    name_pattern: str
    body: str
    referabilities: frozenset[Referability] = CONCRETE_REFERABILITIES
    placement: Placement = Placement.RUNTIME_VISIBLE

    @property
    def is_tool_only(self) -> bool:
        return self.placement is Placement.TOOL_ONLY

    def is_compatible_with(self, referability: Referability) -> bool:
        """True if this template should be generated for ``referability``."""
        return referability in self.referabilities

    def output_name(self, descriptor: TypeDescriptor) -> str:
        return apply_placeholders(self.name_pattern, descriptor)

    def render(self, descriptor: TypeDescriptor) -> str:
        return apply_placeholders(self.body, descriptor)
