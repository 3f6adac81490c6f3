"""Generic symbolic-expression tree helpers.

The tokenizer is kiutils' ``parse_sexp``: a List node is a Python list whose
first element is its tag, an Atom node is a ``str``, ``int`` or ``float``.
"""
from typing import Union

from kiutils.utils.sexpr import parse_sexp

from schemview.exceptions import MalformedDocument

Atom = Union[str, int, float]
Node = Union[Atom, list]


def load_tree(text: str) -> Node:
    """Tokenize document text into a generic tree."""
    if not text or not text.strip():
        raise MalformedDocument("Document is empty")
    try:
        return parse_sexp(text)
    except (AssertionError, IndexError) as e:
        raise MalformedDocument(
            "Document is not a balanced symbolic expression",
            suggestions=["Check for missing or extra parentheses"],
        ) from e


def is_list(node: Node) -> bool:
    return isinstance(node, list)


def tag_of(node: Node) -> str:
    """Tag of a List node, or the text of an Atom."""
    if is_list(node):
        if not node:
            return ""
        head = node[0]
        return head if isinstance(head, str) else ""
    return str(node)


def children(node: Node) -> list:
    """Elements after the tag of a List node."""
    return node[1:] if is_list(node) else []


def find(node: Node, tag: str) -> list | None:
    """First List child with the given tag."""
    for child in children(node):
        if is_list(child) and tag_of(child) == tag:
            return child
    return None


def has_keyword(node: Node, keyword: str) -> bool:
    """True if an Atom child equals keyword."""
    return any(not is_list(child) and str(child) == keyword for child in children(node))


def atom_text(node: Node, index: int, tag: str = "", field: str = "") -> str:
    """Text of the Atom at index, raising MalformedDocument if absent."""
    if not is_list(node) or len(node) <= index or is_list(node[index]):
        raise MalformedDocument(
            f"Expected a value at position {index}",
            tag=tag or tag_of(node),
            field=field or str(index),
        )
    return str(node[index])


def atom_float(node: Node, index: int, tag: str = "", field: str = "") -> float:
    """Numeric Atom at index, raising MalformedDocument if absent or not a number."""
    text = atom_text(node, index, tag, field)
    try:
        return float(text)
    except ValueError as e:
        raise MalformedDocument(
            f"Expected a number, got {text!r}",
            tag=tag or tag_of(node),
            field=field or str(index),
        ) from e


def atom_int(node: Node, index: int, tag: str = "", field: str = "") -> int:
    """Integer Atom at index."""
    value = atom_float(node, index, tag, field)
    if not value.is_integer():
        raise MalformedDocument(
            f"Expected an integer, got {value}",
            tag=tag or tag_of(node),
            field=field or str(index),
        )
    return int(value)
