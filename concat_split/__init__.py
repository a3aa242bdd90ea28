# Expose main components for easy access
from .ir.dtypes import DType, Backend, KernelUnavailableError
from .ir.buffer import TensorBuffer, as_buffer
from .ops.atomic_types import OpType
from .ops.planning import SplitSpec
from .ops.errors import (
    ConcatSplitError,
    AxisOutOfRangeError,
    IndivisibleAxisError,
    SplitCountMismatchError,
    SplitSumMismatchError,
    LengthCountMismatchError,
    ShapeMismatchError,
    ConfigConflictError,
)
from .backend.executor import split, split_by_lengths, concat, run_kernel
from .backend.registry import KernelRegistry
