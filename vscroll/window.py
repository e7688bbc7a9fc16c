# vscroll/window.py
import logging
from dataclasses import dataclass
from typing import Any, Dict, Generic, List, NamedTuple, Optional, Sequence, TypeVar

from .base import ItemId, VirtualItem
from .config import WindowConfig
from .geometry import (
    AxisWindow,
    SizeCache,
    clamp_index,
    compute_axis_window,
    prefix_size,
    resolve_size,
    total_size,
    window_moved,
)

logger = logging.getLogger(__name__)

T = TypeVar('T')


@dataclass(frozen=True)
class WindowRange:
    """
    The slice of a list that must be materialized.

    `end_index` is exclusive. `offset_top` is where the block starts (px),
    `total_height` the size of the whole list and `visible_count` how many
    items fit in the container before buffering.
    """
    start_index: int
    end_index: int
    offset_top: float
    total_height: float
    visible_count: int

    def __len__(self):
        return self.end_index - self.start_index

    def to_dict(self) -> Dict[str, Any]:
        return {
            "startIndex": self.start_index,
            "endIndex": self.end_index,
            "offsetTop": self.offset_top,
            "totalHeight": self.total_height,
            "visibleCount": self.visible_count,
        }


EMPTY_RANGE = WindowRange(0, 0, 0, 0, 0)


@dataclass(frozen=True)
class WindowUpdate:
    """Result of a scroll update. `range` is always freshly computed."""
    range: WindowRange
    scroll_top: float
    scroll_height: float
    needs_update: bool

    @property
    def total_height(self) -> float:
        return self.scroll_height

    def to_dict(self) -> Dict[str, Any]:
        return {
            "range": self.range.to_dict(),
            "scrollTop": self.scroll_top,
            "scrollHeight": self.scroll_height,
            "needsUpdate": self.needs_update,
        }


class ItemPosition(NamedTuple):
    top: float
    height: float


class WindowCore(Generic[T]):
    """
    Windowed-range calculator for a one-dimensional list.

    The core is driven synchronously by the list widget: it feeds the items and
    configuration, pushes every scroll position through
    `update_scroll_position`, and re-renders only when `needs_update` is set.
    The item sequence is not copied; call `set_items` again after mutating it.

    :param config: Initial configuration. Defaults to `WindowConfig()`.
    :param items: Optional initial items.
    """

    def __init__(self, config: Optional[WindowConfig] = None, items: Optional[Sequence[VirtualItem[T]]] = None):
        self._config = config.copy() if config is not None else WindowConfig()
        self._items: Sequence[VirtualItem[T]] = items if items is not None else []
        self._scroll_top = 0.0
        self._last_range: Optional[WindowRange] = None
        self._sizes = SizeCache()

    # ----- state -----
    @property
    def config(self) -> WindowConfig:
        return self._config

    @property
    def items(self) -> Sequence[VirtualItem[T]]:
        return self._items

    @property
    def scroll_top(self) -> float:
        return self._scroll_top

    @property
    def size_cache(self) -> SizeCache:
        return self._sizes

    @property
    def estimated_item_size(self) -> float:
        """Mean of the measured sizes, or the configured default while nothing is measured."""
        mean = self._sizes.mean()
        # A cache holding only zero-size measurements cannot locate a window.
        if mean is None or mean <= 0:
            return self._config.item_size
        return mean

    @property
    def total_height(self) -> float:
        return total_size(self._items, self.item_size)

    def item_size(self, item: VirtualItem[T]) -> float:
        """Resolved size of an item: measured > own override > configured default."""
        return resolve_size(item, self._sizes, self._config.item_size)

    # ----- mutation -----
    def set_items(self, items: Sequence[VirtualItem[T]]) -> None:
        """
        Replaces the item sequence. Measured sizes are kept: they are keyed by
        id, and an id that is reused for a different item keeps its old size.
        """
        self._items = items
        self._invalidate("items replaced")

    def update_config(self, partial: Optional[Dict[str, Any]] = None, **fields: Any) -> None:
        """Merges fields into the configuration (dict and/or keywords)."""
        merged = dict(partial or {})
        merged.update(fields)
        self._config.update(**merged)
        self._invalidate("config updated")

    def set_item_size(self, item_id: ItemId, size: float) -> None:
        """Records a measured size for `item_id` and refreshes the size estimate."""
        self._sizes.set(item_id, size)
        logger.debug("Measured item %r at %r; estimate now %r", item_id, size, self.estimated_item_size)
        self._invalidate("item measured")

    def update_scroll_position(self, scroll_top: float) -> WindowUpdate:
        """
        Computes the window for `scroll_top` (clamped to >= 0).

        The stored range, used for the next comparison and by
        `get_visible_items`, only advances when `needs_update` is True.
        """
        self._scroll_top = max(0, scroll_top)

        rng = self._calculate_range()
        needs_update = self._should_update(rng)
        if needs_update:
            self._last_range = rng
            logger.debug("Window moved to [%d, %d) at scroll %r", rng.start_index, rng.end_index, self._scroll_top)

        return WindowUpdate(
            range=rng,
            scroll_top=self._scroll_top,
            scroll_height=rng.total_height,
            needs_update=needs_update,
        )

    def reset(self) -> None:
        """Clears the scroll position, the stored range and every measured size."""
        self._scroll_top = 0.0
        self._last_range = None
        self._sizes.clear()

    # ----- queries -----
    def get_visible_items(self) -> List[VirtualItem[T]]:
        if self._last_range is None:
            return []
        return list(self._items[self._last_range.start_index:self._last_range.end_index])

    def get_current_range(self) -> Optional[WindowRange]:
        return self._last_range

    def scroll_to_index(self, index: int) -> float:
        """Leading offset of `index`, clamped into the list. Does not scroll."""
        return self._offset_of(clamp_index(index, len(self._items)))

    def get_item_position(self, index: int) -> Optional[ItemPosition]:
        """Top and height of the item at `index`, or None when out of bounds."""
        if index < 0 or index >= len(self._items):
            return None
        return ItemPosition(self._offset_of(index), self.item_size(self._items[index]))

    # ----- internals -----
    def _offset_of(self, index: int) -> float:
        return prefix_size(self._items, index, self.item_size)

    def _calculate_range(self) -> WindowRange:
        if not self._items:
            return EMPTY_RANGE

        cfg = self._config
        window = compute_axis_window(
            length=len(self._items),
            scroll=self._scroll_top,
            estimate=self.estimated_item_size,
            container=cfg.container_height,
            padding=cfg.buffer_size + cfg.overscan,
        )
        return WindowRange(
            start_index=window.start,
            end_index=window.end,
            offset_top=self._offset_of(window.start),
            total_height=self.total_height,
            visible_count=window.visible_count,
        )

    def _should_update(self, rng: WindowRange) -> bool:
        last = self._last_range
        if last is None:
            return True
        return window_moved(
            AxisWindow(rng.start_index, rng.end_index, rng.visible_count),
            last.start_index,
            last.end_index,
        )

    def invalidate(self) -> None:
        """Drops the stored range so the next scroll update is accepted unconditionally."""
        self._invalidate("invalidated by caller")

    def _invalidate(self, reason: str) -> None:
        self._last_range = None
        logger.debug("Window range invalidated: %s", reason)

    def __repr__(self):
        return f"WindowCore(items={len(self._items)}, scroll_top={self._scroll_top!r}, range={self._last_range!r})"
