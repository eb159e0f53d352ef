"""
Inner block storage.

The editor never edits an inner block in place: every change is a full,
ordered replacement of a container's children.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol, Sequence

from .errors import BlockNotFoundError
from .models import AudioItem, InnerBlock, new_client_id


logger = logging.getLogger(__name__)


def create_block(
    name: str,
    attributes: Optional[Mapping[str, Any]] = None,
    client_id: Optional[str] = None,
) -> InnerBlock:
    """Create a new inner block that was not loaded from saved content."""
    return InnerBlock(
        client_id=client_id or new_client_id(),
        name=name,
        attributes=dict(attributes or {}),
    )


def audio_from_blocks(blocks: Iterable[InnerBlock]) -> List[AudioItem]:
    """Read the audio playlist held by a container's inner blocks."""
    return [AudioItem.from_block(block) for block in blocks]


class BlockStore(Protocol):
    """Child content collaborator used by the editor."""

    def get_inner_blocks(self, container_id: str) -> List[InnerBlock]:
        ...

    def replace_inner_blocks(self, container_id: str, blocks: Sequence[InnerBlock]) -> None:
        ...


class InMemoryBlockStore:
    """
    Block store keeping containers and their children in memory.

    Attributes:
        replacements: Number of replace_inner_blocks() calls per container
    """

    def __init__(self):
        self._containers: Dict[str, List[InnerBlock]] = {}
        self.replacements: Dict[str, int] = {}

    def __contains__(self, container_id: str) -> bool:
        return container_id in self._containers

    def add_container(
        self,
        container_id: str,
        blocks: Optional[Iterable[InnerBlock]] = None,
    ) -> None:
        """
        Register a container, optionally with saved children.

        Args:
            container_id: Client id of the container block
            blocks: Initial children (e.g. parsed from saved content)
        """
        self._containers[container_id] = list(blocks or [])
        self.replacements.setdefault(container_id, 0)
        logger.debug(
            f"Registered container {container_id} "
            f"({len(self._containers[container_id])} inner blocks)"
        )

    def remove_container(self, container_id: str) -> None:
        self._containers.pop(container_id, None)
        self.replacements.pop(container_id, None)

    def get_inner_blocks(self, container_id: str) -> List[InnerBlock]:
        """
        Get a container's children in order.

        Raises:
            BlockNotFoundError: If the container is not registered
        """
        try:
            return list(self._containers[container_id])
        except KeyError:
            raise BlockNotFoundError(f"Unknown container block: {container_id}")

    def replace_inner_blocks(self, container_id: str, blocks: Sequence[InnerBlock]) -> None:
        """
        Replace all children of a container.

        Raises:
            BlockNotFoundError: If the container is not registered
        """
        if container_id not in self._containers:
            raise BlockNotFoundError(f"Unknown container block: {container_id}")
        self._containers[container_id] = list(blocks)
        self.replacements[container_id] += 1
        logger.debug(f"Replaced inner blocks of {container_id} ({len(blocks)} blocks)")
