"""Build document trees from typed values."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, List, Tuple

from .exceptions import BuildError, SerializationFailed, UnsupportedValue
from .nodes import ListNode, Node, ObjectNode, is_scalar, scalar_node
from .registry import TypeRegistry
from .serialization import DISCRIMINATOR_KEY, Serializable, SerializableSet

logger = logging.getLogger("treeconf.builder")
logger.addHandler(logging.NullHandler())


@dataclass
class BuildFailure:
    """An entry the builder had to leave out of the tree."""

    path: Tuple[str, ...]
    error: BuildError

    def display_path(self, separator: str = ".") -> str:
        return separator.join(self.path) or "<root>"


class ValueTreeBuilder:
    """Turn typed values into a document tree.

    Mappings (sections included) become object nodes, lists and tuples become
    list nodes, sets are wrapped as :class:`SerializableSet`, serializable
    objects become object nodes tagged with their alias, scalars become leaves.

    A failing map entry or list element is logged, recorded in
    :attr:`failures` and left out; its siblings are still built.
    """

    def __init__(self, registry: TypeRegistry, separator: str = "."):
        """Initialize the builder.

        Args:
            registry: Registry resolving serializable classes to aliases
            separator: Path separator used when reporting failures
        """
        self.registry = registry
        self.separator = separator
        self.failures: List[BuildFailure] = []

    def build(self, value: Any) -> Node:
        """Build the node for a value.

        Args:
            value: Typed value  # (mapping, sequence, set, serializable or scalar)

        Returns:
            Document node

        Raises:
            BuildError: If the root value itself cannot be built
        """
        return self._build(value, ())

    def _build(self, value: Any, path: Tuple[str, ...]) -> Node:
        # Sets have no native node, snapshot them first
        if isinstance(value, (set, frozenset)):
            value = SerializableSet(value)

        if isinstance(value, Mapping):
            return self._build_object(value.items(), path)
        elif isinstance(value, (list, tuple)):
            return self._build_list(value, path)
        elif isinstance(value, Serializable):
            return self._build_serializable(value, path)
        elif is_scalar(value):
            return scalar_node(value)
        raise UnsupportedValue(value)

    def _build_object(self, items: Any, path: Tuple[str, ...]) -> ObjectNode:
        entries = {}  # Dict[str, Node] (built entries, in source order)
        for key, value in items:
            key = str(key)
            entry_path = path + (key,)
            try:
                entries[key] = self._build(value, entry_path)
            except BuildError as e:
                self._record_failure(entry_path, e)
        return ObjectNode(entries)

    def _build_list(self, values: Any, path: Tuple[str, ...]) -> ListNode:
        items = []  # List[Node] (built elements, in source order)
        for index, value in enumerate(values):
            item_path = path + (f"[{index}]",)
            try:
                items.append(self._build(value, item_path))
            except BuildError as e:
                self._record_failure(item_path, e)
        return ListNode(items)

    def _build_serializable(self, value: Serializable, path: Tuple[str, ...]) -> ObjectNode:
        alias = self.registry.alias_for(type(value))
        try:
            fields = value.serialize()
        except Exception as e:
            # serialize() is user code, anything it raises is a failed entry
            raise SerializationFailed(alias, e) from e
        if not isinstance(fields, Mapping):
            raise SerializationFailed(alias, TypeError(f"serialize() returned {type(fields).__name__}, not a mapping"))

        # Discriminator goes first so the alias leads the object in the document
        return self._build_object([(DISCRIMINATOR_KEY, alias), *fields.items()], path)

    def _record_failure(self, path: Tuple[str, ...], error: BuildError) -> None:
        failure = BuildFailure(path, error)
        self.failures.append(failure)
        logger.warning("Skipping '%s' while building document tree: %s", failure.display_path(self.separator), error)
