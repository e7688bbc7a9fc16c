# vscroll/controllers.py
import logging
from typing import Any, Callable, List, Optional, Sequence

from .base import ItemId, VirtualColumn, VirtualItem
from .config import GridConfig, WindowConfig
from .events import ScrollEvent
from .grid import CellOffset, GridCore, GridRange, GridUpdate
from .window import WindowCore, WindowRange, WindowUpdate

logger = logging.getLogger(__name__)


class _ScrollController:
    """
    Listener bookkeeping shared by the list and table controllers.

    Range listeners are called only when the materialized window changes;
    scroll listeners are called for every processed scroll position.
    """

    def __init__(self):
        self._listeners: List[Callable[..., None]] = []
        self._scroll_listeners: List[Callable[[ScrollEvent], None]] = []

    def add_listener(self, listener: Callable[..., None]):
        """Register a closure to be called when the rendered window changes."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: Callable[..., None]):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def add_scroll_listener(self, listener: Callable[[ScrollEvent], None]):
        """Register a closure to be called with a ScrollEvent on every scroll."""
        if listener not in self._scroll_listeners:
            self._scroll_listeners.append(listener)

    def remove_scroll_listener(self, listener: Callable[[ScrollEvent], None]):
        if listener in self._scroll_listeners:
            self._scroll_listeners.remove(listener)

    def _notify_listeners(self, *args):
        for listener in list(self._listeners):
            listener(*args)

    def _notify_scroll_listeners(self, event: ScrollEvent):
        for listener in list(self._scroll_listeners):
            listener(event)


class VirtualListController(_ScrollController):
    """
    Drives a WindowCore on behalf of a virtual list widget.

    The widget forwards its scroll, resize and data changes here and re-renders
    from `visible_items`, positioned at `current_range.offset_top`, whenever a
    range listener fires. Range listeners receive `(range, visible_items)`.

    :param config: Initial window configuration.
    :param items: Optional initial items.
    """

    def __init__(self, config: Optional[WindowConfig] = None, items: Optional[Sequence[VirtualItem]] = None):
        super().__init__()
        self._core = WindowCore(config, items)
        self._current_range: Optional[WindowRange] = None
        self._visible_items: List[VirtualItem] = []

    @property
    def core(self) -> WindowCore:
        return self._core

    @property
    def current_range(self) -> Optional[WindowRange]:
        """The range the widget is currently rendering."""
        return self._current_range

    @property
    def visible_items(self) -> List[VirtualItem]:
        return list(self._visible_items)

    def set_items(self, items: Sequence[VirtualItem]) -> WindowUpdate:
        self._core.set_items(items)
        return self.refresh()

    def update_config(self, **fields: Any) -> WindowUpdate:
        self._core.update_config(**fields)
        return self.refresh()

    def resize(self, container_height: float) -> WindowUpdate:
        """Called when the container's visible height changes."""
        return self.update_config(container_height=container_height)

    def set_item_size(self, item_id: ItemId, size: float) -> None:
        """Feeds back a measured size. The next scroll or refresh picks it up."""
        self._core.set_item_size(item_id, size)

    def on_scroll(self, scroll_top: float) -> WindowUpdate:
        """Processes one (ideally frame-coalesced) scroll position."""
        update = self._core.update_scroll_position(scroll_top)
        if update.needs_update:
            self._apply(update.range)
        self._notify_scroll_listeners(ScrollEvent(
            scroll_top=update.scroll_top,
            scroll_height=update.scroll_height,
            range=update.range,
            needs_update=update.needs_update,
        ))
        return update

    def refresh(self) -> WindowUpdate:
        """Recomputes the window at the current scroll position and re-renders."""
        self._core.invalidate()
        update = self._core.update_scroll_position(self._core.scroll_top)
        self._apply(update.range)
        return update

    def scroll_to_index(self, index: int) -> float:
        """Returns the scroll_top the widget should scroll its container to."""
        return self._core.scroll_to_index(index)

    def item_position(self, index: int):
        return self._core.get_item_position(index)

    def _apply(self, rng: WindowRange):
        self._current_range = rng
        self._visible_items = self._core.get_visible_items()
        logger.debug("List controller rendering %d items from %r", len(self._visible_items), rng.offset_top)
        self._notify_listeners(rng, self.visible_items)

    def __repr__(self):
        return f"VirtualListController(range={self._current_range!r})"


class VirtualTableController(_ScrollController):
    """
    Drives a GridCore on behalf of a virtualized table widget.

    Range listeners receive `(range, visible_rows, visible_columns)`; the fixed
    rows and columns travel inside the range.
    """

    def __init__(
        self,
        config: Optional[GridConfig] = None,
        rows: Optional[Sequence[VirtualItem]] = None,
        columns: Optional[Sequence[VirtualColumn]] = None,
    ):
        super().__init__()
        self._core = GridCore(config, rows, columns)
        self._current_range: Optional[GridRange] = None
        self._visible_rows: List[VirtualItem] = []
        self._visible_columns: List[VirtualColumn] = []

    @property
    def core(self) -> GridCore:
        return self._core

    @property
    def current_range(self) -> Optional[GridRange]:
        return self._current_range

    @property
    def visible_rows(self) -> List[VirtualItem]:
        return list(self._visible_rows)

    @property
    def visible_columns(self) -> List[VirtualColumn]:
        return list(self._visible_columns)

    def set_data(
        self,
        rows: Optional[Sequence[VirtualItem]] = None,
        columns: Optional[Sequence[VirtualColumn]] = None,
    ) -> GridUpdate:
        """Replaces rows and/or columns; None leaves that axis as it is."""
        if rows is not None:
            self._core.set_rows(rows)
        if columns is not None:
            self._core.set_columns(columns)
        return self.refresh()

    def update_config(self, **fields: Any) -> GridUpdate:
        self._core.update_config(**fields)
        return self.refresh()

    def resize(self, container_width: float, container_height: float) -> GridUpdate:
        return self.update_config(container_width=container_width, container_height=container_height)

    def set_row_height(self, row_id: ItemId, height: float) -> None:
        self._core.set_row_height(row_id, height)

    def set_column_width(self, column_id: ItemId, width: float) -> None:
        self._core.set_column_width(column_id, width)

    def on_scroll(self, scroll_top: float, scroll_left: float = 0) -> GridUpdate:
        update = self._core.update_scroll_position(scroll_top, scroll_left)
        if update.needs_update:
            self._apply(update.range)
        self._notify_scroll_listeners(ScrollEvent(
            scroll_top=update.scroll_top,
            scroll_height=update.scroll_height,
            range=update.range,
            needs_update=update.needs_update,
            scroll_left=update.scroll_left,
            scroll_width=update.scroll_width,
        ))
        return update

    def refresh(self) -> GridUpdate:
        self._core.invalidate()
        update = self._core.update_scroll_position(self._core.scroll_top, self._core.scroll_left)
        self._apply(update.range)
        return update

    def scroll_to_cell(self, row_index: int, column_index: int) -> CellOffset:
        return self._core.scroll_to_cell(row_index, column_index)

    def _apply(self, rng: GridRange):
        self._current_range = rng
        self._visible_rows = self._core.get_visible_rows()
        self._visible_columns = self._core.get_visible_columns()
        logger.debug(
            "Table controller rendering %d rows x %d columns",
            len(self._visible_rows), len(self._visible_columns),
        )
        self._notify_listeners(rng, self.visible_rows, self.visible_columns)

    def __repr__(self):
        return f"VirtualTableController(range={self._current_range!r})"
