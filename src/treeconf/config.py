"""TreeConf configuration object module."""

from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Union

from .builder import BuildFailure, ValueTreeBuilder
from .codec import YamlCodec
from .comments import CommentStore
from .deserializer import Deserializer
from .exceptions import InvalidDocument
from .nodes import Node, ObjectNode
from .registry import TypeRegistry, default_registry
from .utils import join_path, split_path, to_plain

logger = logging.getLogger("treeconf.config")
logger.addHandler(logging.NullHandler())


@dataclass
class ConfigurationOptions:
    """Options of a :class:`Configuration`.

    Attributes:
        path_separator: Separator between keys in paths  # (e.g. "a.nested.value")
        indent: Spaces per nesting level in saved documents
    """

    path_separator: str = "."
    indent: int = 2


_DEFAULT_OPTIONS = ConfigurationOptions()


class ConfigSection(MutableMapping):
    """Ordered mapping of configuration values, addressable by path.

    Keys given to ``section[...]``, ``get``, ``in`` and ``del`` are paths:
    "parent.child" walks into the child section "parent". Assigning a dict
    creates a nested section.
    """

    def __init__(
        self,
        values: Optional[Mapping] = None,
        parent: Optional[ConfigSection] = None,
        name: str = "",
    ):
        """Initialize configuration section.

        Args:
            values: Initial values  # (keys are taken literally, not as paths)
            parent: Enclosing section  # (None for a root)
            name: Key of this section inside its parent
        """
        self._data: Dict[str, Any] = {}
        self._parent = parent
        self._root = parent._root if parent is not None else self
        self._name = name
        for key, value in (values or {}).items():
            self._set_direct(str(key), value)

    @property
    def current_path(self) -> str:
        """Full path of this section from the root  # (empty for the root)"""
        if self._parent is None:
            return ""
        return join_path(self._parent.current_path, self._name, self.separator)

    @property
    def separator(self) -> str:
        return getattr(self._root, "options", _DEFAULT_OPTIONS).path_separator

    def __getitem__(self, path: str) -> Any:
        """Dict-style getter with support for nested paths."""
        keys = split_path(path, self.separator)
        section = self._walk(keys[:-1], path)
        return section._data[keys[-1]]

    def __setitem__(self, path: str, value: Any) -> None:
        """Dict-style setter creating intermediate sections as needed."""
        keys = split_path(path, self.separator)
        current = self

        for key in keys[:-1]:
            child = current._data.get(key)
            if not isinstance(child, ConfigSection):
                child = current.create_section(key)
            current = child

        current._set_direct(keys[-1], value)

    def __delitem__(self, path: str) -> None:
        keys = split_path(path, self.separator)
        section = self._walk(keys[:-1], path)
        del section._data[keys[-1]]

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, str):
            return False
        try:
            self[path]
        except KeyError:
            return False
        return True

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    # Views over direct children, so literal keys holding the separator still work
    def keys(self):
        return self._data.keys()

    def items(self):
        return self._data.items()

    def values(self):
        return self._data.values()

    def create_section(self, path: str, values: Optional[Mapping] = None) -> ConfigSection:
        """Create (or replace) a section at a path.

        Args:
            path: Path of the new section
            values: Initial values of the section

        Returns:
            The new section
        """
        keys = split_path(path, self.separator)
        parent = self
        for key in keys[:-1]:
            child = parent._data.get(key)
            if not isinstance(child, ConfigSection):
                child = parent.create_section(key)
            parent = child

        return parent._create_child(keys[-1], values or {})

    def get_values(self, deep: bool = False) -> Dict[str, Any]:
        """Get the values of this section.

        Args:
            deep: Flatten nested sections into full paths  # (leaf values only)

        Returns:
            Ordered key → value mapping  # (sections stay sections when not deep)
        """
        if not deep:
            return dict(self._data)

        result = {}  # Dict[str, Any] (flattened configuration)
        for key, value in self._data.items():
            if isinstance(value, ConfigSection):
                for sub_key, sub_value in value.get_values(deep=True).items():
                    result[join_path(key, sub_key, self.separator)] = sub_value
            else:
                result[key] = value
        return result

    def to_dict(self) -> Dict[str, Any]:
        """Convert to plain nested dictionaries."""
        return to_plain(self)

    def _set_direct(self, key: str, value: Any) -> None:
        if isinstance(value, Mapping):
            self._create_child(key, value)
        else:
            self._data[key] = value

    def _create_child(self, key: str, values: Mapping) -> ConfigSection:
        section = ConfigSection(values, parent=self, name=key)
        self._data[key] = section
        return section

    def _walk(self, keys: List[str], path: str) -> ConfigSection:
        current = self
        for key in keys:
            child = current._data.get(key)
            if not isinstance(child, ConfigSection):
                raise KeyError(f"Key '{key}' not found in path '{path}'")
            current = child
        return current

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_dict()})"


class Configuration(ConfigSection):
    """Root configuration that can be saved to and loaded from YAML.

    Values are converted to a document tree on save and back on load;
    serializable objects are written with their registered alias. Comments
    set on paths are written above the matching keys, and comments found in a
    loaded document are remembered for the next save.
    """

    def __init__(
        self,
        values: Optional[Mapping] = None,
        registry: Optional[TypeRegistry] = None,
        options: Optional[ConfigurationOptions] = None,
    ):
        """Initialize configuration.

        Args:
            values: Initial values
            registry: Type registry  # (defaults to the shared process-wide registry)
            options: Configuration options
        """
        self.options = options or ConfigurationOptions()
        self.registry = registry if registry is not None else default_registry()
        self.last_build_failures: List[BuildFailure] = []
        self._comments = CommentStore()
        super().__init__(values)

    @property
    def comments(self) -> CommentStore:
        return self._comments

    def set_comments(self, path: str, *lines: str) -> None:
        """Set the comments for a path, one string per line; no lines removes them."""
        self._comments.set_comments(path, *lines)

    def get_comments(self, path: str) -> List[str]:
        """Get the comments for a path, or an empty list."""
        return self._comments.get_comments(path)

    def to_document_tree(self, values: Optional[Mapping] = None) -> Node:
        """Build the document tree of this configuration.

        Entries that cannot be built are left out and listed in
        :attr:`last_build_failures`.

        Args:
            values: Mapping to build instead of this configuration's values

        Returns:
            Root object node
        """
        builder = ValueTreeBuilder(self.registry, self.separator)
        tree = builder.build(self if values is None else values)
        self.last_build_failures = builder.failures
        if builder.failures:
            logger.warning("Left %d entr(ies) out of the saved configuration", len(builder.failures))
        return tree

    def from_document_tree(self, node: Node) -> Dict[str, Any]:
        """Convert a document tree into an ordered mapping of typed values.

        Raises:
            ReconstructionError: If a typed object cannot be rebuilt
            InvalidDocument: If the root is not a plain mapping
        """
        values = Deserializer(self.registry).deserialize(node)
        if not isinstance(values, dict):
            raise InvalidDocument(f"Top level of a configuration must be a mapping, got {type(values).__name__}")
        return values

    def save_to_string(self) -> str:
        """Render this configuration as YAML text, comments included."""
        tree = self.to_document_tree()
        separator = self.separator
        return YamlCodec(self.options.indent).render(
            tree, lambda segments: self._comments.comments_for(segments, separator)
        )

    def load_from_string(self, contents: str) -> None:
        """Load values and comments from YAML text.

        Top-level keys of the document replace existing ones, other keys are
        kept. Nothing changes if the document fails to load.

        Args:
            contents: YAML text  # (empty text is ignored)

        Raises:
            InvalidDocument: If the text cannot be parsed or its root is not a mapping
            ReconstructionError: If a typed object cannot be rebuilt
        """
        if not contents:
            return

        tree = YamlCodec(self.options.indent).parse(contents)
        values = self.from_document_tree(tree)

        if isinstance(tree, ObjectNode):
            self._comments.load_comments(tree, "", self.separator)
        for key, value in values.items():
            self._set_direct(key, value)
        logger.debug("Loaded %d top-level key(s)", len(values))

    def save(self, file: Union[str, Path]) -> None:
        """Save this configuration to a file, creating parent directories."""
        path = Path(file)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.save_to_string(), encoding="utf-8")
        logger.debug("Saved configuration to %s", path)

    def load(self, file: Union[str, Path]) -> None:
        """Load values and comments from a file."""
        path = Path(file)
        self.load_from_string(path.read_text(encoding="utf-8"))
        logger.debug("Loaded configuration from %s", path)

    @classmethod
    def load_configuration(cls, file: Union[str, Path], **kwargs: Any) -> Configuration:
        """Create a configuration from a YAML file.

        A missing file gives an empty configuration; any other failure is raised.

        Args:
            file: File to load
            **kwargs: Passed to the constructor  # (registry, options)

        Returns:
            The loaded configuration
        """
        config = cls(**kwargs)
        try:
            config.load(file)
        except FileNotFoundError:
            logger.info("Cannot find file %s, starting with an empty configuration", file)
        return config
