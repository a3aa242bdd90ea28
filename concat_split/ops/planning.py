"""
Shape planning for split and concat.

Planners only look at signatures (dtype + shape). They validate every
invariant and return the per-array axis extents together with the target
output shapes, so that nothing is allocated or copied for a bad request.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Sequence, Tuple

import numpy as np
import torch

from ..ir.buffer import TensorBuffer
from ..ir.dtypes import TensorSignature
from .axis import canonical_axis
from .errors import (
    IndivisibleAxisError,
    LengthCountMismatchError,
    ShapeMismatchError,
    SplitCountMismatchError,
    SplitSumMismatchError,
)


class SplitMode(Enum):
    EQUAL = "equal"
    EXPLICIT = "explicit"
    EXTERNAL = "external"


@dataclass(frozen=True)
class SplitSpec:
    mode: SplitMode = SplitMode.EQUAL
    extents: Tuple[int, ...] = ()

    @classmethod
    def equal(cls) -> "SplitSpec":
        return cls(SplitMode.EQUAL)

    @classmethod
    def explicit(cls, extents: Sequence[int]) -> "SplitSpec":
        return cls(SplitMode.EXPLICIT, tuple(int(e) for e in extents))

    @classmethod
    def external(cls, sizes: Any) -> "SplitSpec":
        """Split sizes supplied as an integer array (numpy, torch or TensorBuffer)."""
        return cls(SplitMode.EXTERNAL, _host_ints(sizes))


@dataclass(frozen=True)
class AxisDecomposition:
    """(before, axis, after) view of an array around one axis."""

    before: int
    axis_extent: int
    after: int

    @classmethod
    def of(cls, shape: Sequence[int], axis: int) -> "AxisDecomposition":
        return cls(
            math.prod(shape[:axis]), shape[axis], math.prod(shape[axis + 1 :])
        )


@dataclass(frozen=True)
class SplitPlan:
    axis: int
    extents: Tuple[int, ...]
    output_shapes: Tuple[Tuple[int, ...], ...]
    layout: AxisDecomposition


@dataclass(frozen=True)
class ConcatPlan:
    axis: int
    extents: Tuple[int, ...]
    output_shape: Tuple[int, ...]
    layout: AxisDecomposition


def _host_ints(values: Any) -> Tuple[int, ...]:
    if isinstance(values, TensorBuffer):
        values = values.to_numpy()
    elif isinstance(values, torch.Tensor):
        values = values.detach().cpu().numpy()
    return tuple(int(v) for v in np.asarray(values).reshape(-1))


def _check_output_count(output_count: int):
    if output_count < 1:
        raise ValueError(f"Split requires at least one output, got {output_count}")


def plan_equal_split(axis_extent: int, output_count: int) -> Tuple[int, ...]:
    _check_output_count(output_count)
    if axis_extent % output_count != 0:
        raise IndivisibleAxisError(axis_extent, output_count)
    return (axis_extent // output_count,) * output_count


def plan_explicit_split(
    extents: Sequence[int],
    output_count: int,
    axis_extent: int,
    add_axis: bool = False,
) -> Tuple[int, ...]:
    extents = tuple(int(e) for e in extents)
    if not add_axis:
        _check_output_count(output_count)
    if len(extents) != output_count:
        raise SplitCountMismatchError(output_count, len(extents))

    if add_axis:
        # Each output takes a single slice of the removed axis, so an empty
        # axis yields no outputs.
        if output_count != axis_extent:
            raise SplitSumMismatchError(
                axis_extent,
                output_count,
                f"Splitting off an axis of size {axis_extent} needs exactly "
                f"{axis_extent} outputs, got {output_count}",
            )
        return (1,) * output_count

    _check_non_negative(extents, axis_extent)
    if sum(extents) != axis_extent:
        raise SplitSumMismatchError(axis_extent, sum(extents))
    return extents


def plan_length_groups(
    lengths: Sequence[int], output_count: int, axis_extent: int
) -> Tuple[int, ...]:
    """
    Sums consecutive, equally sized groups of `lengths`, one group per output.
    [2, 3, 1, 4] with 2 outputs -> (5, 5)
    """
    _check_output_count(output_count)
    lengths = tuple(int(v) for v in lengths)
    if len(lengths) % output_count != 0:
        raise LengthCountMismatchError(len(lengths), output_count)
    _check_non_negative(lengths, axis_extent)

    group = len(lengths) // output_count
    extents = tuple(
        sum(lengths[i * group : (i + 1) * group]) for i in range(output_count)
    )
    if sum(extents) != axis_extent:
        raise SplitSumMismatchError(axis_extent, sum(extents))
    return extents


def _check_non_negative(extents: Tuple[int, ...], axis_extent: int):
    for i, e in enumerate(extents):
        if e < 0:
            raise SplitSumMismatchError(
                axis_extent, sum(extents), f"Split size {e} at position {i} is negative"
            )


def _split_shapes(
    shape: Tuple[int, ...], axis: int, extents: Tuple[int, ...], add_axis: bool
) -> Tuple[Tuple[int, ...], ...]:
    if add_axis:
        reduced = shape[:axis] + shape[axis + 1 :]
        return tuple(reduced for _ in extents)
    return tuple(shape[:axis] + (e,) + shape[axis + 1 :] for e in extents)


def plan_split(
    data: TensorSignature,
    axis: int,
    output_count: int,
    spec: SplitSpec = SplitSpec(),
    add_axis: bool = False,
) -> SplitPlan:
    # In split, insertion mode removes an axis the input already has.
    canonical = canonical_axis(axis, data.rank)
    layout = AxisDecomposition.of(data.shape, canonical)

    if spec.mode is SplitMode.EQUAL:
        if add_axis:
            extents = plan_explicit_split(
                (1,) * output_count, output_count, layout.axis_extent, add_axis
            )
        else:
            extents = plan_equal_split(layout.axis_extent, output_count)
    else:
        extents = plan_explicit_split(
            spec.extents, output_count, layout.axis_extent, add_axis
        )

    return SplitPlan(
        canonical,
        extents,
        _split_shapes(data.shape, canonical, extents, add_axis),
        layout,
    )


def plan_split_by_lengths(
    data: TensorSignature, axis: int, lengths: Any, output_count: int
) -> SplitPlan:
    canonical = canonical_axis(axis, data.rank)
    layout = AxisDecomposition.of(data.shape, canonical)
    extents = plan_length_groups(
        _host_ints(lengths), output_count, layout.axis_extent
    )
    return SplitPlan(
        canonical,
        extents,
        _split_shapes(data.shape, canonical, extents, False),
        layout,
    )


def plan_concat(
    inputs: Sequence[TensorSignature], axis: int, add_axis: bool = False
) -> ConcatPlan:
    if not inputs:
        raise ValueError("Concat requires at least one input")

    first = inputs[0]
    rank = first.rank
    canonical = canonical_axis(axis, rank, add_axis)

    for i, sig in enumerate(inputs[1:], start=1):
        if sig.dtype != first.dtype:
            raise ShapeMismatchError(
                i,
                None,
                first.dtype,
                sig.dtype,
                f"All inputs must have the same type, expected {first.dtype.value} "
                f"but got {sig.dtype.value} for input {i}",
            )
        if sig.rank != rank:
            raise ShapeMismatchError(
                i,
                None,
                rank,
                sig.rank,
                f"Input {i} has rank {sig.rank}, expected {rank} "
                f"({list(first.shape)} vs {list(sig.shape)})",
            )

    for d in range(rank):
        if d == canonical and not add_axis:
            continue
        for j, sig in enumerate(inputs[1:], start=1):
            if sig.shape[d] != first.shape[d]:
                raise ShapeMismatchError(
                    j,
                    d,
                    first.shape[d],
                    sig.shape[d],
                    f"Input {j} has size {sig.shape[d]} at axis {d}, expected {first.shape[d]}. "
                    f"Inputs may only differ along axis {canonical} when no axis is added "
                    f"({list(first.shape)} vs {list(sig.shape)})",
                )

    if add_axis:
        extents = (1,) * len(inputs)
        output_shape = first.shape[:canonical] + (len(inputs),) + first.shape[canonical:]
        after = math.prod(first.shape[canonical:])
    else:
        extents = tuple(sig.shape[canonical] for sig in inputs)
        output_shape = first.shape[:canonical] + (sum(extents),) + first.shape[canonical + 1 :]
        after = math.prod(first.shape[canonical + 1 :])

    layout = AxisDecomposition(math.prod(first.shape[:canonical]), sum(extents), after)
    return ConcatPlan(canonical, extents, output_shape, layout)
