"""YAML document codec.

Parses YAML text into document trees and renders trees back to block-style
YAML, both through ruamel.yaml's round-trip mode. Full-line ``#`` comments
directly above a mapping key are attached to that key's value node on parse,
and emitted above the key again on render.
"""

from __future__ import annotations

import datetime
import io
import logging
from collections.abc import Mapping
from typing import Any, Callable, Dict, List, Optional, Set, Tuple

from ruamel.yaml.comments import CommentedMap, CommentedSeq
from ruamel.yaml.error import YAMLError
from ruamel.yaml.scalarbool import ScalarBoolean

from .exceptions import InvalidDocument
from .nodes import ListNode, Node, ObjectNode, StringNode, scalar_node
from .utils import document_yaml

logger = logging.getLogger("treeconf.codec")
logger.addHandler(logging.NullHandler())

CommentLookup = Callable[[Tuple[str, ...]], List[str]]

# bool before int, since bool is a subclass of int
_PLAIN_TYPES = (bool, int, float, str)


class YamlCodec:
    """Text ↔ document tree conversion for YAML documents."""

    def __init__(self, indent: int = 2):
        """Initialize codec.

        Args:
            indent: Spaces per nesting level when rendering
        """
        self.indent = indent

    def parse(self, text: str) -> Node:
        """Parse YAML text into a document tree.

        Anchors, aliases and ``<<`` merge keys are resolved here, so the tree
        holds plain values only.

        Args:
            text: YAML document text

        Returns:
            Root node  # (empty ObjectNode for empty or comment-only text)

        Raises:
            InvalidDocument: If the text is not a single well-formed YAML document,
                or holds values a document tree cannot represent
        """
        yaml = document_yaml(self.indent)
        try:
            data = yaml.load(text)
        except YAMLError as e:
            logger.debug("YAML parse failed: %s", e)
            mark = getattr(e, "problem_mark", None)
            raise InvalidDocument(f"Cannot parse document: {e}", line=mark.line + 1 if mark else None) from e

        if data is None:
            return ObjectNode()
        return self._to_node(data, yaml.scanner.full_line_comments, set())

    def _to_node(self, value: Any, comments: Dict[int, str], claimed: Set[int]) -> Node:
        if isinstance(value, Mapping):
            return self._to_object(value, comments, claimed)
        elif isinstance(value, list):
            return ListNode([self._to_node(item, comments, claimed) for item in value])
        return self._to_leaf(value)

    def _to_object(self, mapping: Mapping, comments: Dict[int, str], claimed: Set[int]) -> ObjectNode:
        # Merged-in keys have no position of their own
        positions = (mapping.lc.data if isinstance(mapping, CommentedMap) else None) or {}
        entries = {}  # Dict[str, Node] (entries in document order)
        for key, value in mapping.items():
            block: List[str] = []
            position = positions.get(key)
            # Keys sharing a line (flow mappings) leave the comment to the first one
            if position is not None and position[0] not in claimed:
                claimed.add(position[0])
                block = self._comments_above(comments, position[0])

            child = self._to_node(value, comments, claimed)
            child.comments = tuple(block)
            entries[self._key_text(key)] = child
        return ObjectNode(entries)

    def _to_leaf(self, value: Any) -> Node:
        if value is None:
            return scalar_node(None)
        if isinstance(value, ScalarBoolean):
            return scalar_node(bool(value))
        if isinstance(value, datetime.date):
            return StringNode(value.isoformat())
        for plain_type in _PLAIN_TYPES:
            if isinstance(value, plain_type):
                # Drop ruamel's formatting subclasses (ScalarFloat, LiteralScalarString, ...)
                return scalar_node(plain_type(value))
        raise InvalidDocument(f"Cannot hold a value of type {type(value).__name__} in a document tree")

    def _key_text(self, key: Any) -> str:
        if key is None:
            return "null"
        if isinstance(key, bool):
            return "true" if key else "false"
        return str(key)

    def _comments_above(self, comments: Dict[int, str], line: int) -> List[str]:
        """Collect the comment block ending right above a line.

        Args:
            comments: Full-line comments by zero-based line
            line: Zero-based line of the key

        Returns:
            Comment lines without marker, in document order
        """
        block = []  # List[str] (comment lines, bottom-up)
        line -= 1
        # Blank lines and content end the block
        while line in comments:
            text = comments[line][1:]
            block.append(text[1:] if text.startswith(" ") else text)
            line -= 1
        block.reverse()
        return block

    def render(self, node: Node, comments: Optional[CommentLookup] = None) -> str:
        """Render a document tree as block-style YAML.

        Args:
            node: Root node
            comments: Lookup returning the comment lines for a key path  # (path segments from the root)

        Returns:
            YAML text  # (empty string for an empty root object)
        """
        lookup = comments or (lambda segments: [])

        if isinstance(node, ObjectNode) and not node.entries:
            return ""
        stream = io.StringIO()
        document_yaml(self.indent).dump(self._to_yaml(node, (), lookup), stream)
        return stream.getvalue()

    def _to_yaml(self, node: Node, path: Optional[Tuple[str, ...]], lookup: CommentLookup) -> Any:
        if isinstance(node, ObjectNode):
            mapping = CommentedMap()
            for key, child in node.items():
                # Objects inside lists have no path, so no comments either
                child_path = path + (key,) if path is not None else None
                mapping[key] = self._to_yaml(child, child_path, lookup)
                if child_path is not None:
                    self._set_comments(mapping, key, lookup(child_path), len(path) * self.indent)
            return mapping
        elif isinstance(node, ListNode):
            return CommentedSeq(self._to_yaml(item, None, lookup) for item in node)
        return node.unwrapped()

    def _set_comments(self, mapping: CommentedMap, key: str, lines: List[str], column: int) -> None:
        """Attach comment lines above a key.

        Args:
            mapping: Mapping holding the key
            key: Key to comment
            lines: Comment lines  # (embedded line breaks start new comment lines)
            column: Column of the key
        """
        parts = [part for line in lines for part in (line.splitlines() or [""])]
        if not parts:
            return

        mapping.yaml_set_comment_before_after_key(key, before="\n".join(parts), indent=column)
        # ruamel writes empty comments as blank lines, which would end the block on load
        for token in mapping.ca.items[key][1]:
            if token.value == "\n":
                token.value = "#\n"
