"""Turn document trees back into typed values."""

from __future__ import annotations

from typing import Any, Dict, List

from .exceptions import ReconstructionError
from .nodes import ListNode, Node, ObjectNode
from .registry import TypeRegistry
from .serialization import DISCRIMINATOR_KEY


class Deserializer:
    """Recursive, stateless document tree → typed value transform.

    Children are converted before their parent, so the most nested typed
    objects are reconstructed first and the outermost object last. Any
    reconstruction failure propagates to the caller.
    """

    def __init__(self, registry: TypeRegistry):
        """Initialize deserializer.

        Args:
            registry: Registry resolving aliases to reconstructors
        """
        self.registry = registry

    def deserialize(self, node: Node) -> Any:
        """Convert a node into its typed value.

        Args:
            node: Document node

        Returns:
            Dict for plain objects, list for lists, the scalar for leaves, or
            whatever the registered reconstructor returns for typed objects

        Raises:
            ReconstructionError: If a typed object cannot be rebuilt  # (UnknownAlias included)
        """
        if isinstance(node, ObjectNode):
            return self._deserialize_object(node)
        elif isinstance(node, ListNode):
            return self._deserialize_list(node)
        return node.unwrapped()

    def _deserialize_object(self, node: ObjectNode) -> Any:
        output: Dict[str, Any] = {key: self.deserialize(value) for key, value in node.items()}

        if DISCRIMINATOR_KEY not in output:
            return output

        alias = output.pop(DISCRIMINATOR_KEY)
        if not isinstance(alias, str):
            raise ReconstructionError(alias, "alias must be a string", output)
        return self.registry.reconstruct(alias, output)

    def _deserialize_list(self, node: ListNode) -> List[Any]:
        return [self.deserialize(item) for item in node]
