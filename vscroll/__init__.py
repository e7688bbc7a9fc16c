# vscroll/__init__.py

"""
vscroll - virtual scroll core

Windowed-range calculators for virtualized lists (WindowCore) and grids with
frozen rows/columns (GridCore). The cores never touch a visual surface: a
widget feeds them items and scroll positions and renders what they return.
"""

# --- Data model ---
from .base import VirtualItem, VirtualColumn, ItemId, check_item_id

# --- Configuration ---
from .config import Config, ConfigError, WindowConfig, GridConfig, get_config

# --- Calculators ---
from .geometry import SizeCache, AxisWindow
from .window import WindowCore, WindowRange, WindowUpdate, ItemPosition
from .grid import GridCore, GridRange, GridUpdate, CellOffset, AxisPosition

# --- Widget glue ---
from .events import ScrollEvent
from .controllers import VirtualListController, VirtualTableController

__version__ = "0.1.0"

__all__ = [
    "VirtualItem",
    "VirtualColumn",
    "ItemId",
    "check_item_id",
    "Config",
    "ConfigError",
    "WindowConfig",
    "GridConfig",
    "get_config",
    "SizeCache",
    "AxisWindow",
    "WindowCore",
    "WindowRange",
    "WindowUpdate",
    "ItemPosition",
    "GridCore",
    "GridRange",
    "GridUpdate",
    "CellOffset",
    "AxisPosition",
    "ScrollEvent",
    "VirtualListController",
    "VirtualTableController",
]
