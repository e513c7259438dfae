"""Type registry mapping aliases to reconstructors."""

from __future__ import annotations

import inspect
import logging
from typing import Any, Callable, Dict, Optional, Tuple

from .exceptions import ReconstructionError, UnknownAlias, UnregisteredType
from .serialization import Serializable, SerializableSet

logger = logging.getLogger("treeconf.registry")
logger.addHandler(logging.NullHandler())

Reconstructor = Callable[[Dict[str, Any]], Any]


class TypeRegistry:
    """Registry of serializable types, keyed by alias.

    The registry is plain mutable state without locking: populate it during
    start-up, before configurations are loaded or saved from several threads.
    """

    def __init__(self) -> None:
        self._reconstructors: Dict[str, Reconstructor] = {}
        self._aliases: Dict[type, str] = {}  # (class -> alias, for the save direction)
        self.register_class(SerializableSet)
        logger.debug("TypeRegistry initialized id=%s", hex(id(self)))

    def register(self, alias: str, reconstructor: Reconstructor, cls: Optional[type] = None) -> None:
        """Register or replace the reconstructor for an alias.

        Args:
            alias: Stable name written to documents in place of the class name
            reconstructor: Callable taking the field mapping and returning an instance,
                or a Serializable subclass whose ``deserialize`` is used
            cls: Class whose instances are saved under this alias  # (inferred when reconstructor is a class)
        """
        if cls is None and inspect.isclass(reconstructor) and issubclass(reconstructor, Serializable):
            cls = reconstructor
            reconstructor = reconstructor.deserialize

        previous = self._reconstructors.get(alias)
        self._reconstructors[alias] = reconstructor
        if cls is not None:
            self._aliases[cls] = alias
        logger.debug(
            "Register alias=%r cls=%s replaced=%s",
            alias,
            getattr(cls, "__qualname__", None),
            previous is not None,
        )

    def register_class(self, cls: type, alias: Optional[str] = None) -> str:
        """Register a Serializable subclass.

        Args:
            cls: Serializable subclass to register
            alias: Alias to use  # (defaults to cls.SERIALIZED_ALIAS, then cls.__qualname__)

        Returns:
            The alias the class was registered under
        """
        alias = alias or getattr(cls, "SERIALIZED_ALIAS", None) or cls.__qualname__
        self.register(alias, cls.deserialize, cls)
        return alias

    def unregister(self, alias: str) -> None:
        """Remove an alias and every class saved under it."""
        self._reconstructors.pop(alias, None)
        for cls in [c for c, a in self._aliases.items() if a == alias]:
            del self._aliases[cls]
        logger.debug("Unregister alias=%r", alias)

    def has(self, alias: str) -> bool:
        return alias in self._reconstructors

    def aliases(self) -> Tuple[str, ...]:
        return tuple(self._reconstructors.keys())

    def alias_for(self, cls: type) -> str:
        """Get the alias a class is saved under.

        Args:
            cls: Class of the object being saved

        Returns:
            Registered alias

        Raises:
            UnregisteredType: If the class was never registered
        """
        try:
            return self._aliases[cls]
        except KeyError:
            raise UnregisteredType(cls) from None

    def reconstruct(self, alias: str, fields: Dict[str, Any]) -> Any:
        """Rebuild an object from its alias and fields.

        Args:
            alias: Alias read from the discriminator key
            fields: Remaining fields of the object  # (nested typed objects already rebuilt)

        Returns:
            Reconstructed object

        Raises:
            UnknownAlias: If the alias is not registered
            ReconstructionError: If the reconstructor rejects the fields
        """
        if alias not in self._reconstructors:
            logger.debug("Reconstruct miss alias=%r known=%r", alias, self.aliases())
            raise UnknownAlias(alias, fields)

        reconstructor = self._reconstructors[alias]
        try:
            return reconstructor(fields)
        except (TypeError, ValueError, KeyError) as e:
            raise ReconstructionError(alias, str(e), fields) from e

    def clear(self) -> None:
        """Drop every registration except the built-in set alias."""
        logger.debug("Clearing registry: aliases=%d", len(self._reconstructors))
        self._reconstructors.clear()
        self._aliases.clear()
        self.register_class(SerializableSet)


_DEFAULT_REGISTRY: Optional[TypeRegistry] = None


def default_registry() -> TypeRegistry:
    """Return the process-wide registry, creating it on first use."""
    global _DEFAULT_REGISTRY
    if _DEFAULT_REGISTRY is None:
        _DEFAULT_REGISTRY = TypeRegistry()
    return _DEFAULT_REGISTRY
