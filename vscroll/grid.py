# vscroll/grid.py
import logging
from dataclasses import dataclass
from typing import Any, Dict, Generic, List, NamedTuple, Optional, Sequence, Tuple, TypeVar

from .base import ItemId, VirtualColumn, VirtualItem
from .config import GridConfig
from .geometry import (
    AxisWindow,
    EMPTY_AXIS,
    SizeCache,
    clamp_index,
    compute_axis_window,
    fixed_slices,
    prefix_size,
    resolve_size,
    total_size,
    window_moved,
)

logger = logging.getLogger(__name__)

T = TypeVar('T')


@dataclass(frozen=True)
class GridRange:
    """
    The block of a grid that must be materialized, plus the pinned regions.

    Row and column bounds are end-exclusive and never include the pinned
    rows/columns, which are carried whole in the `fixed_*` tuples.
    """
    start_row_index: int
    end_row_index: int
    row_offset_top: float
    total_row_height: float
    visible_row_count: int

    start_column_index: int
    end_column_index: int
    column_offset_left: float
    total_column_width: float
    visible_column_count: int

    fixed_rows_top: Tuple[VirtualItem, ...] = ()
    fixed_rows_bottom: Tuple[VirtualItem, ...] = ()
    fixed_columns_left: Tuple[VirtualColumn, ...] = ()
    fixed_columns_right: Tuple[VirtualColumn, ...] = ()

    @property
    def row_window(self) -> AxisWindow:
        return AxisWindow(self.start_row_index, self.end_row_index, self.visible_row_count)

    @property
    def column_window(self) -> AxisWindow:
        return AxisWindow(self.start_column_index, self.end_column_index, self.visible_column_count)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "startRowIndex": self.start_row_index,
            "endRowIndex": self.end_row_index,
            "rowOffsetTop": self.row_offset_top,
            "totalRowHeight": self.total_row_height,
            "visibleRowCount": self.visible_row_count,
            "startColumnIndex": self.start_column_index,
            "endColumnIndex": self.end_column_index,
            "columnOffsetLeft": self.column_offset_left,
            "totalColumnWidth": self.total_column_width,
            "visibleColumnCount": self.visible_column_count,
            "fixedRows": {
                "top": list(self.fixed_rows_top),
                "bottom": list(self.fixed_rows_bottom),
            },
            "fixedColumns": {
                "left": list(self.fixed_columns_left),
                "right": list(self.fixed_columns_right),
            },
        }


@dataclass(frozen=True)
class GridUpdate:
    range: GridRange
    scroll_top: float
    scroll_left: float
    scroll_height: float
    scroll_width: float
    needs_update: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "range": self.range.to_dict(),
            "scrollTop": self.scroll_top,
            "scrollLeft": self.scroll_left,
            "scrollHeight": self.scroll_height,
            "scrollWidth": self.scroll_width,
            "needsUpdate": self.needs_update,
        }


class CellOffset(NamedTuple):
    scroll_top: float
    scroll_left: float


class AxisPosition(NamedTuple):
    offset: float
    size: float


class GridCore(Generic[T]):
    """
    Windowed-range calculator for a grid: the list algorithm run independently
    on rows and columns, with leading/trailing rows and columns pinned outside
    virtualization.

    The table widget calls `update_scroll_position(top, left)` on every scroll
    and re-renders when either axis moved past its hysteresis threshold.
    """

    def __init__(
        self,
        config: Optional[GridConfig] = None,
        rows: Optional[Sequence[VirtualItem[T]]] = None,
        columns: Optional[Sequence[VirtualColumn]] = None,
    ):
        self._config = config.copy() if config is not None else GridConfig()
        self._rows: Sequence[VirtualItem[T]] = rows if rows is not None else []
        self._columns: Sequence[VirtualColumn] = columns if columns is not None else []
        self._scroll_top = 0.0
        self._scroll_left = 0.0
        self._last_range: Optional[GridRange] = None
        self._row_heights = SizeCache()
        self._column_widths = SizeCache()

    # ----- state -----
    @property
    def config(self) -> GridConfig:
        return self._config

    @property
    def rows(self) -> Sequence[VirtualItem[T]]:
        return self._rows

    @property
    def columns(self) -> Sequence[VirtualColumn]:
        return self._columns

    @property
    def scroll_top(self) -> float:
        return self._scroll_top

    @property
    def scroll_left(self) -> float:
        return self._scroll_left

    @property
    def estimated_row_height(self) -> float:
        mean = self._row_heights.mean()
        if mean is None or mean <= 0:
            return self._config.row_height
        return mean

    @property
    def estimated_column_width(self) -> float:
        mean = self._column_widths.mean()
        if mean is None or mean <= 0:
            return self._config.column_width
        return mean

    @property
    def total_row_height(self) -> float:
        return total_size(self._rows, self.row_height)

    @property
    def total_column_width(self) -> float:
        return total_size(self._columns, self.column_width)

    def row_height(self, row: VirtualItem[T]) -> float:
        return resolve_size(row, self._row_heights, self._config.row_height)

    def column_width(self, column: VirtualColumn) -> float:
        return resolve_size(column, self._column_widths, self._config.column_width)

    # ----- mutation -----
    def set_rows(self, rows: Sequence[VirtualItem[T]]) -> None:
        self._rows = rows
        self._invalidate("rows replaced")

    def set_columns(self, columns: Sequence[VirtualColumn]) -> None:
        self._columns = columns
        self._invalidate("columns replaced")

    def update_config(self, partial: Optional[Dict[str, Any]] = None, **fields: Any) -> None:
        merged = dict(partial or {})
        merged.update(fields)
        self._config.update(**merged)
        self._invalidate("config updated")

    def set_row_height(self, row_id: ItemId, height: float) -> None:
        self._row_heights.set(row_id, height)
        logger.debug("Measured row %r at %r", row_id, height)
        self._invalidate("row measured")

    def set_column_width(self, column_id: ItemId, width: float) -> None:
        self._column_widths.set(column_id, width)
        logger.debug("Measured column %r at %r", column_id, width)
        self._invalidate("column measured")

    def update_scroll_position(self, scroll_top: float, scroll_left: float = 0) -> GridUpdate:
        """
        Computes the grid window for the given scroll offsets (each clamped to
        >= 0). `needs_update` is True when either axis moved far enough.
        """
        self._scroll_top = max(0, scroll_top)
        self._scroll_left = max(0, scroll_left)

        rng = self._calculate_range()
        needs_update = self._should_update(rng)
        if needs_update:
            self._last_range = rng
            logger.debug(
                "Grid window moved to rows [%d, %d) columns [%d, %d)",
                rng.start_row_index, rng.end_row_index, rng.start_column_index, rng.end_column_index,
            )

        return GridUpdate(
            range=rng,
            scroll_top=self._scroll_top,
            scroll_left=self._scroll_left,
            scroll_height=rng.total_row_height,
            scroll_width=rng.total_column_width,
            needs_update=needs_update,
        )

    def reset(self) -> None:
        self._scroll_top = 0.0
        self._scroll_left = 0.0
        self._last_range = None
        self._row_heights.clear()
        self._column_widths.clear()

    # ----- queries -----
    def get_visible_rows(self) -> List[VirtualItem[T]]:
        if self._last_range is None:
            return []
        return list(self._rows[self._last_range.start_row_index:self._last_range.end_row_index])

    def get_visible_columns(self) -> List[VirtualColumn]:
        if self._last_range is None:
            return []
        return list(self._columns[self._last_range.start_column_index:self._last_range.end_column_index])

    def get_current_range(self) -> Optional[GridRange]:
        return self._last_range

    def scroll_to_cell(self, row_index: int, column_index: int) -> CellOffset:
        """Leading offsets of a cell, each index clamped into its axis. Does not scroll."""
        return CellOffset(
            scroll_top=prefix_size(self._rows, clamp_index(row_index, len(self._rows)), self.row_height),
            scroll_left=prefix_size(
                self._columns, clamp_index(column_index, len(self._columns)), self.column_width
            ),
        )

    def get_row_position(self, index: int) -> Optional[AxisPosition]:
        if index < 0 or index >= len(self._rows):
            return None
        return AxisPosition(prefix_size(self._rows, index, self.row_height), self.row_height(self._rows[index]))

    def get_column_position(self, index: int) -> Optional[AxisPosition]:
        if index < 0 or index >= len(self._columns):
            return None
        return AxisPosition(
            prefix_size(self._columns, index, self.column_width), self.column_width(self._columns[index])
        )

    # ----- internals -----
    def _axis_window(self, entries, scroll, estimate, container, leading, trailing, size_of) -> AxisWindow:
        if not entries:
            return EMPTY_AXIS
        lead, trail = fixed_slices(entries, leading, trailing)
        cfg = self._config
        return compute_axis_window(
            length=len(entries),
            scroll=scroll,
            estimate=estimate,
            container=container,
            padding=cfg.buffer_size + cfg.overscan,
            leading_count=leading,
            trailing_count=trailing,
            leading_size=total_size(lead, size_of),
            trailing_size=total_size(trail, size_of),
        )

    def _calculate_range(self) -> GridRange:
        cfg = self._config

        rows = self._axis_window(
            self._rows, self._scroll_top, self.estimated_row_height, cfg.container_height,
            cfg.fixed_rows_top, cfg.fixed_rows_bottom, self.row_height,
        )
        columns = self._axis_window(
            self._columns, self._scroll_left, self.estimated_column_width, cfg.container_width,
            cfg.fixed_columns_left, cfg.fixed_columns_right, self.column_width,
        )
        rows_top, rows_bottom = fixed_slices(self._rows, cfg.fixed_rows_top, cfg.fixed_rows_bottom)
        columns_left, columns_right = fixed_slices(
            self._columns, cfg.fixed_columns_left, cfg.fixed_columns_right
        )

        return GridRange(
            start_row_index=rows.start,
            end_row_index=rows.end,
            row_offset_top=prefix_size(self._rows, rows.start, self.row_height),
            total_row_height=self.total_row_height,
            visible_row_count=rows.visible_count,
            start_column_index=columns.start,
            end_column_index=columns.end,
            column_offset_left=prefix_size(self._columns, columns.start, self.column_width),
            total_column_width=self.total_column_width,
            visible_column_count=columns.visible_count,
            fixed_rows_top=tuple(rows_top),
            fixed_rows_bottom=tuple(rows_bottom),
            fixed_columns_left=tuple(columns_left),
            fixed_columns_right=tuple(columns_right),
        )

    def _should_update(self, rng: GridRange) -> bool:
        last = self._last_range
        if last is None:
            return True
        row_changed = window_moved(rng.row_window, last.start_row_index, last.end_row_index)
        column_changed = window_moved(rng.column_window, last.start_column_index, last.end_column_index)
        return row_changed or column_changed

    def invalidate(self) -> None:
        """Drops the stored range so the next scroll update is accepted unconditionally."""
        self._invalidate("invalidated by caller")

    def _invalidate(self, reason: str) -> None:
        self._last_range = None
        logger.debug("Grid range invalidated: %s", reason)

    def __repr__(self):
        return (
            f"GridCore(rows={len(self._rows)}, columns={len(self._columns)}, "
            f"scroll=({self._scroll_top!r}, {self._scroll_left!r}), range={self._last_range!r})"
        )
