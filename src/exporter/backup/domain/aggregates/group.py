"""Group aggregate for the backup context."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from backup.domain.value_objects import DEFAULT_GROUP_NAME, Node, validate_name


@dataclass
class Group:
    """A named bundle of permission assignments that users can hold.

    Group names are unique case-insensitively and are stored lower-case.
    The node list keeps the order the storage layer returned it in, which
    is the order the export writes the group's commands in.

    The ordering weight is not a column of its own: like every other
    attribute it is carried by a node (``weight.<n>``), so replaying the
    exported node commands also restores the weight.
    """

    name: str
    nodes: list[Node] = field(default_factory=list)

    @classmethod
    def create(
        cls,
        name: str,
        weight: int | None = None,
        nodes: Iterable[Node] = (),
    ) -> Group:
        """Factory method for creating a group.

        Args:
            name: The group name (normalized to lower case)
            weight: Optional ordering weight, stored as a weight node
            nodes: Initial permission assignments

        Returns:
            A new Group

        Raises:
            InvalidNameError: If the name is invalid
        """
        group = cls(name=validate_name(name), nodes=list(nodes))
        if weight is not None:
            group.nodes.append(Node.weight_node(weight))
        return group

    @property
    def is_default(self) -> bool:
        return self.name == DEFAULT_GROUP_NAME

    @property
    def weight(self) -> int | None:
        """Highest weight granted by a true, global weight node."""
        weights = [
            node.weight
            for node in self.nodes
            if node.weight is not None and node.value and node.contexts.is_empty()
        ]
        return max(weights) if weights else None

    def add_node(self, node: Node) -> None:
        """Append a permission assignment."""
        self.nodes.append(node)
