from .atomic_types import OpType
from .axis import canonical_axis, axis_from_order, resolve_axis_attrs, StorageOrder
from .planning import (
    SplitMode,
    SplitSpec,
    AxisDecomposition,
    SplitPlan,
    ConcatPlan,
    plan_equal_split,
    plan_explicit_split,
    plan_length_groups,
    plan_split,
    plan_split_by_lengths,
    plan_concat,
)

__all__ = [
    "OpType",
    "canonical_axis",
    "axis_from_order",
    "resolve_axis_attrs",
    "StorageOrder",
    "SplitMode",
    "SplitSpec",
    "AxisDecomposition",
    "SplitPlan",
    "ConcatPlan",
    "plan_equal_split",
    "plan_explicit_split",
    "plan_length_groups",
    "plan_split",
    "plan_split_by_lengths",
    "plan_concat",
]
