"""Utility functions for TreeConf."""

from collections.abc import Mapping
from typing import Any, Dict, List

from ruamel.yaml import YAML
from ruamel.yaml.scanner import RoundTripScanner


class CommentScanner(RoundTripScanner):
    """Round-trip scanner that also records where full-line comments sit.

    Attributes:
        full_line_comments: Zero-based line → comment text  # (marker included, eol comments left out)
    """

    def __init__(self, loader: Any = None):
        self.full_line_comments: Dict[int, str] = {}
        super().__init__(loader=loader)

    def scan_to_next_token(self) -> Any:
        found = super().scan_to_next_token()
        if found is not None:
            value, start_mark, _ = found
            # Runs of blank lines come back here too
            if value.startswith("#") and _starts_line(start_mark):
                self.full_line_comments[start_mark.line] = value.split("\n", 1)[0].rstrip()
        return found


def _starts_line(mark: Any) -> bool:
    """Check that only indentation precedes a mark on its line."""
    return not mark.buffer[mark.pointer - mark.column : mark.pointer].strip()


def document_yaml(indent: int = 2) -> YAML:
    """Create a round-trip YAML instance for a single parse or render.

    Args:
        indent: Spaces per nesting level when dumping

    Returns:
        YAML instance whose scanner records full-line comments
    """
    yaml = YAML(typ="rt")
    yaml.Scanner = CommentScanner
    yaml.indent(mapping=indent, sequence=indent + 2, offset=indent)
    yaml.width = 4096
    return yaml


def split_path(path: str, separator: str = ".") -> List[str]:
    """Split a configuration path into its keys.

    Args:
        path: Path like "parent.child.grandchild"
        separator: Path separator

    Returns:
        Keys along the path  # (a single key when the separator is absent)
    """
    return path.split(separator)


def join_path(prefix: str, key: str, separator: str = ".") -> str:
    """Join a key onto a path prefix (bare key when the prefix is empty)."""
    return f"{prefix}{separator}{key}" if prefix else key


def to_plain(value: Any) -> Any:
    """Recursively convert mappings to dicts and tuples to lists.

    Args:
        value: Value possibly holding sections or other mapping types

    Returns:
        Plain data  # (nested dict/list structure, other values untouched)
    """
    if isinstance(value, Mapping):
        result: Dict[str, Any] = {}
        for key, item in value.items():
            result[key] = to_plain(item)
        return result
    elif isinstance(value, (list, tuple)):
        return [to_plain(item) for item in value]
    return value
