"""Document tree nodes.

A document tree is the format-agnostic shape a configuration takes between
the typed values an application holds and the text a codec reads or writes.
It only knows six kinds of node: null, bool, number, string, list and
object. Objects keep their keys in the order they were built in.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Tuple, Union

from .exceptions import UnsupportedValue


@dataclass
class Node:
    """Base class of all document nodes.

    Attributes:
        comments: Comment lines found directly above this node when it was
            parsed  # (origin metadata, ignored by equality)
    """

    comments: Tuple[str, ...] = field(default=(), compare=False, kw_only=True)

    def unwrapped(self) -> Any:
        """Return the plain Python data this node represents."""
        raise NotImplementedError


@dataclass
class NullNode(Node):
    """The null leaf."""

    def unwrapped(self) -> None:
        return None


@dataclass
class BoolNode(Node):
    value: bool

    def unwrapped(self) -> bool:
        return self.value


@dataclass
class NumberNode(Node):
    value: Union[int, float]

    def unwrapped(self) -> Union[int, float]:
        return self.value


@dataclass
class StringNode(Node):
    value: str

    def unwrapped(self) -> str:
        return self.value


@dataclass
class ListNode(Node):
    """Ordered list of child nodes."""

    items: List[Node] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Node]:
        return iter(self.items)

    def unwrapped(self) -> List[Any]:
        return [item.unwrapped() for item in self.items]


@dataclass
class ObjectNode(Node):
    """Ordered string-keyed mapping of child nodes."""

    entries: Dict[str, Node] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, key: str) -> bool:
        return key in self.entries

    def __getitem__(self, key: str) -> Node:
        return self.entries[key]

    def keys(self):
        return self.entries.keys()

    def items(self):
        return self.entries.items()

    def unwrapped(self) -> Dict[str, Any]:
        return {key: value.unwrapped() for key, value in self.entries.items()}


ScalarNode = Union[NullNode, BoolNode, NumberNode, StringNode]


def scalar_node(value: Any) -> ScalarNode:
    """Create the leaf node for a scalar value.

    Args:
        value: None, bool, int, float or str

    Returns:
        Leaf node holding the value unchanged

    Raises:
        UnsupportedValue: If value is not one of the scalar types
    """
    if value is None:
        return NullNode()
    # bool first, since bool is a subclass of int
    if isinstance(value, bool):
        return BoolNode(value)
    if isinstance(value, (int, float)):
        return NumberNode(value)
    if isinstance(value, str):
        return StringNode(value)
    raise UnsupportedValue(value)


def is_scalar(value: Any) -> bool:
    """Check whether a value is stored as a leaf node."""
    return value is None or isinstance(value, (bool, int, float, str))
