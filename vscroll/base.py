# vscroll/base.py
from typing import Any, Generic, Optional, TypeVar, Union

ItemId = Union[str, int]
T = TypeVar('T')

FIXED_LEFT = 'left'
FIXED_RIGHT = 'right'


def check_item_id(value: Any) -> ItemId:
    """
    Validates an item/row/column identifier.

    Ids are used as size-cache keys, so they must be plain strings or integers.
    Booleans are rejected even though they are ints, since `True == 1` would
    silently share a cache slot with id 1.

    :param value: The candidate id.
    :return: The id, unchanged.
    """
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise TypeError(f"Item id {value!r} (type: {type(value).__name__}) must be a str or int.")
    return value


class VirtualItem(Generic[T]):
    """
    One entry of a virtualized sequence: an item of a list, or a row of a grid.

    :param id: Stable identifier used as the size-cache key.
    :param data: Opaque payload, never inspected by the cores.
    :param height: Optional explicit size override (px).
    """
    __slots__ = ('id', 'data', 'height')

    def __init__(self, id: ItemId, data: Optional[T] = None, height: Optional[float] = None):
        self.id = check_item_id(id)
        self.data = data
        self.height = height

    @property
    def size(self) -> Optional[float]:
        return self.height

    def __eq__(self, other):
        return (
            isinstance(other, VirtualItem)
            and self.id == other.id
            and self.height == other.height
            and self.data == other.data
        )

    def __hash__(self):
        return hash((self.__class__, self.id))

    def __repr__(self):
        return f"VirtualItem(id={self.id!r}, height={self.height!r})"


class VirtualColumn(Generic[T]):
    """
    A column of a virtualized grid.

    :param id: Stable identifier used as the size-cache key.
    :param data: Opaque payload (e.g. the table's column definition).
    :param width: Optional explicit width override (px).
    :param min_width: Lower bound applied to the resolved width.
    :param max_width: Upper bound applied to the resolved width.
    :param fixed: 'left', 'right' or None. Informational only; the fixed
        regions are driven by the grid configuration counts.
    """
    __slots__ = ('id', 'data', 'width', 'min_width', 'max_width', 'fixed')

    def __init__(
        self,
        id: ItemId,
        data: Optional[T] = None,
        width: Optional[float] = None,
        min_width: Optional[float] = None,
        max_width: Optional[float] = None,
        fixed: Optional[str] = None,
    ):
        if fixed not in (None, FIXED_LEFT, FIXED_RIGHT):
            raise ValueError(f"Column fixed side must be 'left', 'right' or None, got {fixed!r}")
        self.id = check_item_id(id)
        self.data = data
        self.width = width
        self.min_width = min_width
        self.max_width = max_width
        self.fixed = fixed

    @property
    def size(self) -> Optional[float]:
        return self.width

    def clamp(self, width: float) -> float:
        """Clamps a resolved width into this column's min/max bounds."""
        if self.min_width is not None and width < self.min_width:
            width = self.min_width
        if self.max_width is not None and width > self.max_width:
            width = self.max_width
        return width

    def __eq__(self, other):
        return (
            isinstance(other, VirtualColumn)
            and self.id == other.id
            and self.width == other.width
            and self.min_width == other.min_width
            and self.max_width == other.max_width
            and self.fixed == other.fixed
            and self.data == other.data
        )

    def __hash__(self):
        return hash((self.__class__, self.id))

    def __repr__(self):
        return f"VirtualColumn(id={self.id!r}, width={self.width!r}, fixed={self.fixed!r})"
