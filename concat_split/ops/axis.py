from enum import Enum
from typing import Any, Dict, Tuple

from .. import config
from .errors import AxisOutOfRangeError, ConfigConflictError


class StorageOrder(Enum):
    NCHW = "NCHW"
    NHWC = "NHWC"

    @property
    def channel_axis(self) -> int:
        return 1 if self is StorageOrder.NCHW else 3


def axis_from_order(order: Any) -> int:
    """Axis holding the channels for a named storage order ("NCHW" or "NHWC")."""
    if isinstance(order, StorageOrder):
        return order.channel_axis
    try:
        return StorageOrder(str(order).upper()).channel_axis
    except ValueError:
        raise ValueError(f"Unsupported storage order: {order}") from None


def canonical_axis(axis: int, rank: int, add_axis: bool = False) -> int:
    """
    Maps a possibly negative axis into [0, rank).
    When a new axis is being inserted the valid range is [0, rank + 1).
    """
    effective_rank = rank + 1 if add_axis else rank
    resolved = axis + effective_rank if axis < 0 else axis
    if not 0 <= resolved < effective_rank:
        raise AxisOutOfRangeError(axis, effective_rank)
    return resolved


def resolve_axis_attrs(attrs: Dict[str, Any]) -> Tuple[int, bool]:
    """
    Reads the raw axis and insertion flag from operator attributes.
    attrs['axis']: int (optional, with attrs['add_axis'])
    attrs['order']: storage order token (optional)
    """
    if "axis" in attrs and "order" in attrs:
        raise ConfigConflictError(
            "Specify either the axis or the storage order, not both"
        )
    if "axis" in attrs:
        return int(attrs["axis"]), bool(attrs.get("add_axis", False))
    return axis_from_order(attrs.get("order", config.DEFAULT_STORAGE_ORDER)), False
