"""
Errors raised while planning a split or concat.

Every error is raised before any output is allocated, and carries the
offending values as attributes.
"""

from typing import Any, Optional


class ConcatSplitError(ValueError):
    """Base class for invalid split/concat requests."""


class AxisOutOfRangeError(ConcatSplitError):
    def __init__(self, axis: int, rank: int):
        self.axis = axis
        self.rank = rank
        super().__init__(
            f"Axis {axis} is out of range for rank {rank}: expected -{rank} <= axis < {rank}"
        )


class IndivisibleAxisError(ConcatSplitError):
    def __init__(self, axis_extent: int, output_count: int):
        self.axis_extent = axis_extent
        self.output_count = output_count
        super().__init__(
            f"Cannot split an axis of size {axis_extent} evenly into {output_count} outputs. "
            "Pass explicit split sizes instead."
        )


class SplitCountMismatchError(ConcatSplitError):
    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Got {actual} split sizes for {expected} outputs; the counts must match"
        )


class SplitSumMismatchError(ConcatSplitError):
    def __init__(self, expected: int, actual: int, message: Optional[str] = None):
        self.expected = expected
        self.actual = actual
        super().__init__(
            message
            or f"Split sizes add up to {actual}, but the split axis has size {expected}"
        )


class LengthCountMismatchError(ConcatSplitError):
    def __init__(self, length_count: int, output_count: int):
        self.length_count = length_count
        self.output_count = output_count
        super().__init__(
            f"Number of lengths ({length_count}) must be divisible by the number of outputs ({output_count})"
        )


class ShapeMismatchError(ConcatSplitError):
    def __init__(
        self,
        input_index: int,
        axis: Optional[int],
        expected: Any,
        actual: Any,
        message: Optional[str] = None,
    ):
        self.input_index = input_index
        self.axis = axis
        self.expected = expected
        self.actual = actual
        super().__init__(
            message
            or f"Input {input_index} has size {actual} at axis {axis}, expected {expected}"
        )


class ConfigConflictError(ConcatSplitError):
    """Two mutually exclusive settings were supplied together."""
