"""TreeConf - Commented Tree Configuration.

Converts typed configuration values to ordered document trees and back,
keeps serializable objects tagged by a registered alias, and carries path-keyed
comments across load and save.
"""
# ruff: noqa: F401

from .builder import BuildFailure, ValueTreeBuilder
from .codec import YamlCodec
from .comments import CommentStore
from .config import ConfigSection, Configuration, ConfigurationOptions
from .deserializer import Deserializer
from .exceptions import (
    BuildError,
    InvalidDocument,
    ReconstructionError,
    SerializationFailed,
    TreeConfError,
    UnknownAlias,
    UnregisteredType,
    UnsupportedValue,
)
from .nodes import BoolNode, ListNode, Node, NullNode, NumberNode, ObjectNode, StringNode, scalar_node
from .registry import TypeRegistry, default_registry
from .serialization import DISCRIMINATOR_KEY, SET_ALIAS, Serializable, SerializableSet

__version__ = "0.1.0"
