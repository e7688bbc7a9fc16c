# vscroll/events.py

from dataclasses import dataclass
from typing import Optional, Union

from .grid import GridRange
from .window import WindowRange


@dataclass(frozen=True)
class ScrollEvent:
    """Emitted by a controller for every scroll position it processes."""
    scroll_top: float
    scroll_height: float
    range: Union[WindowRange, GridRange]
    needs_update: bool
    scroll_left: Optional[float] = None
    scroll_width: Optional[float] = None
