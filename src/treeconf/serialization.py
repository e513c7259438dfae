"""Serializable objects.

Classes that want to live inside a configuration derive from
:class:`Serializable`. They hand out their state as a plain mapping of fields
and are rebuilt from that mapping on load. In the document, a serialized
object is an ordinary object with one extra key, :data:`DISCRIMINATOR_KEY`,
holding the alias the class was registered under.
"""

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, Iterable, Optional, Set

# Reserved field marking an object as a serialized typed object. A registered
# type must not use it as a field name of its own.
DISCRIMINATOR_KEY = "=="

# Reserved alias for snapshotted sets.
SET_ALIAS = "set"


class Serializable(ABC):
    """Base class for objects that can be stored in a configuration.

    Subclasses implement :meth:`serialize`. The default :meth:`deserialize`
    calls the class with the stored fields as keyword arguments; override it
    when the constructor does not match the serialized fields.

    Attributes:
        SERIALIZED_ALIAS: Alias used by ``TypeRegistry.register_class`` when
            no explicit alias is given  # (defaults to the class qualname)
    """

    SERIALIZED_ALIAS: ClassVar[Optional[str]] = None

    @abstractmethod
    def serialize(self) -> Dict[str, Any]:
        """Return the fields describing this object.

        Returns:
            Ordered mapping of field name to value  # (values may be nested collections or serializables)
        """

    @classmethod
    def deserialize(cls, fields: Dict[str, Any]) -> Any:
        """Rebuild an instance from its serialized fields.

        Args:
            fields: Field mapping as produced by :meth:`serialize`, with nested
                typed objects already reconstructed

        Returns:
            The reconstructed instance
        """
        return cls(**fields)


class SerializableSet(Serializable):
    """Wrapper that lets an unordered set travel through an ordered document.

    The set is snapshotted into a list when wrapped; iteration order of the
    snapshot is whatever the set yields, so two snapshots of the same set
    share membership but not necessarily order.
    """

    SERIALIZED_ALIAS = SET_ALIAS

    def __init__(self, values: Iterable[Any]):
        self.values = list(values)

    def serialize(self) -> Dict[str, Any]:
        return {"values": self.values}

    @classmethod
    def deserialize(cls, fields: Dict[str, Any]) -> Set[Any]:
        """Rebuild the original set from the stored snapshot.

        Tuples come back from the document as lists and nested sets as sets,
        so members are turned back into tuples and frozensets first.
        """
        return {_hashable(value) for value in fields["values"]}

    def __repr__(self) -> str:
        return f"SerializableSet({self.values!r})"


def _hashable(value: Any) -> Any:
    if isinstance(value, list):
        return tuple(_hashable(item) for item in value)
    elif isinstance(value, (set, frozenset)):
        return frozenset(_hashable(item) for item in value)
    return value
