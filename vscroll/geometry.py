# vscroll/geometry.py
"""
Axis helpers shared by the list and grid window calculators.

Everything here works on a single axis: a sequence of entries (items, rows or
columns), a size cache, and a configured default size. The 2D core simply
runs these helpers twice.
"""
import logging
import math
from itertools import islice
from typing import Callable, Dict, Iterator, NamedTuple, Optional, Sequence, Tuple

from .base import ItemId, VirtualColumn

logger = logging.getLogger(__name__)

HYSTERESIS_RATIO = 0.5


class SizeCache:
    """
    Measured sizes keyed by item id, plus the running mean of those sizes.

    Re-measuring an id replaces its previous value, so the mean is always the
    average over the ids currently in the cache.
    """

    def __init__(self):
        self._sizes: Dict[ItemId, float] = {}
        self._total = 0.0

    def set(self, item_id: ItemId, size: float) -> Optional[float]:
        """
        Records `size` for `item_id` and returns the value it replaced, if any.
        Non-finite sizes are dropped and leave the cache unchanged.
        """
        if not math.isfinite(size):
            logger.warning("Non-finite size %r measured for id %r; ignoring it", size, item_id)
            return None
        if size < 0:
            logger.warning("Negative size %r measured for id %r; clamping to 0", size, item_id)
            size = 0
        previous = self._sizes.get(item_id)
        if previous is not None:
            self._total -= previous
        self._sizes[item_id] = size
        self._total += size
        return previous

    def get(self, item_id: ItemId, default: Optional[float] = None) -> Optional[float]:
        return self._sizes.get(item_id, default)

    def mean(self) -> Optional[float]:
        """Average of all recorded sizes, or None while nothing is recorded."""
        if not self._sizes:
            return None
        return self._total / len(self._sizes)

    def clear(self) -> None:
        self._sizes.clear()
        self._total = 0.0

    def __contains__(self, item_id) -> bool:
        return item_id in self._sizes

    def __len__(self) -> int:
        return len(self._sizes)

    def __iter__(self) -> Iterator[ItemId]:
        return iter(self._sizes)

    def __repr__(self):
        return f"SizeCache(entries={len(self._sizes)}, mean={self.mean()!r})"


def resolve_size(entry, cache: SizeCache, default: float) -> float:
    """
    Size of one entry: measured size, else the entry's own override, else the
    configured default. Column bounds apply to the override/default only; a
    measured size is what is actually on screen.
    """
    measured = cache.get(entry.id)
    if measured is not None:
        return measured
    size = entry.size
    if size is None:
        size = default
    if isinstance(entry, VirtualColumn):
        size = entry.clamp(size)
    return size


def prefix_size(entries: Sequence, index: int, size_of: Callable[[object], float]) -> float:
    """Sum of the sizes of the entries before `index` (linear scan)."""
    if index <= 0:
        return 0
    return sum(size_of(entry) for entry in islice(entries, index))


def total_size(entries: Sequence, size_of: Callable[[object], float]) -> float:
    return sum(size_of(entry) for entry in entries)


def clamp_index(index: int, length: int) -> int:
    """Clamps `index` into [0, length - 1]; an empty axis clamps to 0."""
    return max(0, min(index, length - 1))


def fixed_slices(entries: Sequence, leading: int, trailing: int) -> Tuple[list, list]:
    """
    Returns the (leading, trailing) pinned slices of `entries`.

    The trailing slice is taken from what the leading slice leaves over, so
    the two never overlap, and a count of zero gives an empty slice.
    """
    length = len(entries)
    lead_end = min(leading, length)
    trail_start = max(lead_end, length - trailing)
    return list(entries[:lead_end]), list(entries[trail_start:])


class AxisWindow(NamedTuple):
    start: int
    end: int
    visible_count: int


EMPTY_AXIS = AxisWindow(0, 0, 0)


def compute_axis_window(
    length: int,
    scroll: float,
    estimate: float,
    container: float,
    padding: int,
    leading_count: int = 0,
    trailing_count: int = 0,
    leading_size: float = 0,
    trailing_size: float = 0,
) -> AxisWindow:
    """
    Locates the buffered window on one axis.

    The window is estimated from the average size rather than the per-entry
    sizes, so this is O(1). `padding` is buffer + overscan, applied on both
    sides. Pinned entries at either end are excluded from the window, and
    their total size is taken off the container extent.

    Guarantees `leading_count <= start <= end <= length - trailing_count`
    whenever the pinned counts fit in the sequence, and `0 <= start <= end <= length` always.
    """
    if length == 0:
        return EMPTY_AXIS

    available = container - leading_size - trailing_size
    span = available / estimate
    if math.isfinite(span):
        visible_count = max(0, math.ceil(span))
    else:
        visible_count = length if span > 0 else 0

    offset = (scroll - leading_size) / estimate
    if math.isfinite(offset):
        raw_start = max(leading_count, math.floor(offset))
    else:
        # An unbounded scroll lands past the last entry; NaN stays at the top.
        raw_start = length + padding if offset > 0 else leading_count

    lower = min(leading_count, length)
    upper = max(lower, length - trailing_count)
    start = min(max(lower, raw_start - padding), upper)
    end = max(start, min(upper, raw_start + visible_count + padding))
    return AxisWindow(start, end, visible_count)


def hysteresis_threshold(visible_count: int) -> int:
    return max(1, math.floor(visible_count * HYSTERESIS_RATIO))


def window_moved(new: AxisWindow, old_start: int, old_end: int) -> bool:
    """True when either edge moved by at least the hysteresis threshold."""
    threshold = hysteresis_threshold(new.visible_count)
    return abs(new.start - old_start) >= threshold or abs(new.end - old_end) >= threshold
