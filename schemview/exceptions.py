"""
Exception hierarchy for schemview.

Every error carries a message plus optional context and suggestions,
which are folded into ``str(error)``::

    raise MalformedDocument(
        "Position needs two coordinates",
        context={"tag": "at", "got": "(at 1)"},
    )
"""
from __future__ import annotations

from typing import Any, Optional


class SchemviewError(Exception):
    """
    Base exception for all schemview errors.

    Attributes:
        context: Dictionary of contextual information (tag, field, value)
        suggestions: List of hints for fixing the input
    """

    def __init__(
        self,
        message: str,
        context: Optional[dict[str, Any]] = None,
        suggestions: Optional[list[str]] = None,
    ):
        self.message = message
        self.context = context or {}
        self.suggestions = suggestions or []
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = [self.message]

        if self.context:
            parts.append("\n\nContext:")
            for key, value in self.context.items():
                parts.append(f"\n  {key}: {value}")

        if self.suggestions:
            parts.append("\n\nSuggestions:")
            for suggestion in self.suggestions:
                parts.append(f"\n  - {suggestion}")

        return "".join(parts)

    def __str__(self) -> str:
        return self._format_message()


class MalformedDocument(SchemviewError, ValueError):
    """
    The document cannot be turned into a schematic.

    Raised for a non-list root, a tokenizer failure, or a recognized tag
    whose required field is missing or unparseable.
    """

    def __init__(
        self,
        message: str,
        context: Optional[dict[str, Any]] = None,
        suggestions: Optional[list[str]] = None,
        tag: Optional[str] = None,
        field: Optional[str] = None,
    ):
        ctx = context or {}
        if tag is not None and "tag" not in ctx:
            ctx["tag"] = tag
        if field is not None and "field" not in ctx:
            ctx["field"] = field
        super().__init__(message, ctx, suggestions)


class UnresolvedTemplateReference(SchemviewError):
    """A placed symbol cites a library id that is not in lib_symbols."""

    def __init__(self, lib_id: str, available: Optional[list[str]] = None):
        self.lib_id = lib_id
        self.available = available or []
        suggestions = []
        if not self.available:
            suggestions.append("The document has no lib_symbols block before its symbols")
        super().__init__(
            f"Symbol '{lib_id}' is not defined in the symbol library",
            context={"lib_id": lib_id, "library_size": len(self.available)},
            suggestions=suggestions,
        )


class DegenerateArc(SchemviewError, ArithmeticError):
    """The three control points of an arc do not define a circle."""

    def __init__(self, start: tuple[float, float], mid: tuple[float, float], end: tuple[float, float]):
        self.points = (start, mid, end)
        super().__init__(
            "Arc control points are colinear or coincident",
            context={"start": start, "mid": mid, "end": end},
        )
