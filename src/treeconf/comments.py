"""Path-keyed comment store."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Tuple

from .nodes import Node, ObjectNode
from .utils import join_path

logger = logging.getLogger("treeconf.comments")
logger.addHandler(logging.NullHandler())


class CommentStore:
    """Comment lines attached to configuration paths.

    Lines are stored verbatim, without the comment marker. The store is
    filled from parsed documents on load and read by the codec on save; since
    the builder keeps key order, a path always renders at the same place.
    """

    def __init__(self) -> None:
        self._comments: Dict[str, List[str]] = {}

    def set_comments(self, path: str, *lines: str) -> None:
        """Set the comments for a path.

        Args:
            path: Configuration path to comment
            *lines: Comment lines, one string per line  # (none removes the comments of the path)
        """
        if not lines:
            self._comments.pop(path, None)
        else:
            self._comments[path] = list(lines)

    def get_comments(self, path: str) -> List[str]:
        """Get the comments for a path.

        Args:
            path: Configuration path

        Returns:
            The comment lines, or an empty list if the path has none
        """
        return list(self._comments.get(path, []))

    def comments_for(self, segments: Iterable[str], separator: str = ".") -> List[str]:
        """Look up comments by path segments, as the codec walks a tree."""
        return self.get_comments(separator.join(segments))

    def load_comments(self, node: Node, prefix: str = "", separator: str = ".") -> None:
        """Record the comments carried by a freshly parsed tree.

        Args:
            node: Parsed document node  # (comments come from node.comments)
            prefix: Path of ``node``  # (empty for the root)
            separator: Path separator joining keys
        """
        if node.comments:
            self._comments[prefix] = list(node.comments)
            logger.debug("Loaded %d comment line(s) for path=%r", len(node.comments), prefix)

        # Lists and scalars have no named sub-paths
        if isinstance(node, ObjectNode):
            for key, child in node.items():
                self.load_comments(child, join_path(prefix, key, separator), separator)

    def paths(self) -> Tuple[str, ...]:
        return tuple(self._comments.keys())

    def clear(self) -> None:
        self._comments.clear()

    def __contains__(self, path: str) -> bool:
        return path in self._comments

    def __len__(self) -> int:
        return len(self._comments)
