"""
Transport-agnostic renderer interface.

Defines the seams the renderer needs to complete a block tree:
  - fetching the children of a block (by id), and
  - fetching the text of an attached file (by URL).

Both are async callables so a render can suspend on network I/O. Tests pass
in-memory implementations; `ContentService` passes `NotionClient` methods.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, List, Optional, Protocol, Sequence

from ..models.blocks import Block
from .asset_cache import AssetCache
from .options import RenderConfig

LOGGER = logging.getLogger(__name__)


class BlockChildrenFetcher(Protocol):
    """Return the ordered children of a block; may raise on transport errors."""

    async def __call__(self, block_id: str) -> List[Block]: ...


class TextFetcher(Protocol):
    """Return the body of a remote text file, or None on a non-success status."""

    async def __call__(self, url: str) -> Optional[str]: ...


@dataclass(frozen=True)
class RenderContext:
    """Everything a render needs besides the blocks themselves."""

    fetch_children: BlockChildrenFetcher
    fetch_text: Optional[TextFetcher] = None
    assets: Optional[AssetCache] = None
    config: RenderConfig = field(default_factory=RenderConfig)

    async def children_of(self, block: Block) -> List[Block]:
        """Children of `block`; fetch failures are logged and read as empty."""
        if not block.has_children:
            return []
        try:
            return list(await self.fetch_children(block.id))
        except Exception as exc:
            LOGGER.warning("Failed to fetch children for %s: %s", block.id, exc)
            return []


# Renders an ordered sibling list; passed to block renderers so they can
# recurse into children without importing the tree renderer.
TreeRenderer = Callable[[Sequence[Block], RenderContext], Awaitable[str]]


@dataclass
class InMemoryBlockSource:
    """Canned block tree keyed by parent id; implements BlockChildrenFetcher."""

    children: Dict[str, Sequence[Block]] = field(default_factory=dict)
    calls: List[str] = field(default_factory=list)

    async def __call__(self, block_id: str) -> List[Block]:
        self.calls.append(block_id)
        return list(self.children.get(block_id, ()))
