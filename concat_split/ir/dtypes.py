import math
from enum import Enum
from dataclasses import dataclass
from typing import Tuple, Optional, Any

import numpy as np
import torch


class KernelUnavailableError(RuntimeError):
    """Raised when a kernel or device context is not available for the requested backend."""


def _numpy_equivalent(t_dtype: torch.dtype) -> Any:
    try:
        return torch.empty(0, dtype=t_dtype).numpy().dtype
    except TypeError:
        # bfloat16 and friends have no numpy counterpart
        return t_dtype


class DType:
    """
    Element type of an array.

    Wraps the concrete numpy dtype, or the torch dtype when numpy has no
    equivalent (e.g. bfloat16). Copies only need the item size and whether
    elements own references, so any plain dtype is accepted. Two DTypes are
    equal when they name the same element type, whichever library they
    came from.
    """

    FP16: "DType"
    FP32: "DType"
    FP64: "DType"
    BF16: "DType"
    INT8: "DType"
    INT16: "DType"
    INT32: "DType"
    INT64: "DType"
    UINT8: "DType"
    BOOL: "DType"
    COMPLEX64: "DType"
    OBJECT: "DType"

    __slots__ = ("native", "value")

    def __init__(self, native: Any):
        if isinstance(native, DType):
            native = native.native
        if isinstance(native, torch.dtype):
            native = _numpy_equivalent(native)
        else:
            native = np.dtype(native)
        self.native = native
        self.value = str(native).replace("torch.", "")

    def __eq__(self, other):
        if not isinstance(other, DType):
            return NotImplemented
        return self.value == other.value

    def __hash__(self):
        return hash(self.value)

    def __repr__(self):
        return f"DType({self.value})"

    @property
    def itemsize(self) -> int:
        """Returns the number of bytes per element."""
        return self.native.itemsize

    @property
    def is_trivially_copyable(self) -> bool:
        """False for element types that own references and must be copied one by one."""
        if isinstance(self.native, torch.dtype):
            return True
        return not self.native.hasobject

    def to_numpy(self) -> np.dtype:
        if isinstance(self.native, torch.dtype):
            raise KernelUnavailableError(f"{self.value} has no numpy representation")
        return self.native

    def to_torch(self) -> torch.dtype:
        if isinstance(self.native, torch.dtype):
            return self.native
        if not self.is_trivially_copyable:
            raise KernelUnavailableError(f"{self.value} arrays cannot be stored in torch")
        try:
            return torch.from_numpy(np.empty(0, dtype=self.native)).dtype
        except (TypeError, ValueError):
            raise KernelUnavailableError(
                f"{self.value} has no torch representation"
            ) from None

    @classmethod
    def from_numpy(cls, dtype: Any) -> "DType":
        return cls(np.dtype(dtype))

    @classmethod
    def from_torch(cls, dtype: torch.dtype) -> "DType":
        return cls(dtype)


DType.FP16 = DType(np.float16)
DType.FP32 = DType(np.float32)
DType.FP64 = DType(np.float64)
DType.BF16 = DType(torch.bfloat16)
DType.INT8 = DType(np.int8)
DType.INT16 = DType(np.int16)
DType.INT32 = DType(np.int32)
DType.INT64 = DType(np.int64)
DType.UINT8 = DType(np.uint8)
DType.BOOL = DType(np.bool_)
DType.COMPLEX64 = DType(np.complex64)
DType.OBJECT = DType(np.object_)


def get_size_bytes(shape: Tuple[int, ...], dtype: DType) -> int:
    """
    Centralized logic for calculating total byte size.
    Scalar shapes () hold a single element.
    """
    if any(d is None or d < 0 for d in shape):
        raise ValueError(f"Cannot calculate byte size for shape: {shape}")
    return math.prod(shape) * dtype.itemsize


class Backend(Enum):
    CPU_NUMPY = "cpu_numpy"
    CPU_TORCH = "cpu_torch"
    GPU_TORCH = "gpu_torch"


@dataclass(frozen=True)
class TensorSignature:
    """
    Type, shape and backend of an array, which is all the planners look at.
    """

    dtype: DType
    shape: Tuple[int, ...]
    backend: Optional[Backend] = None

    @property
    def rank(self) -> int:
        return len(self.shape)

    def __repr__(self):
        shape_str = ",".join(str(d) for d in self.shape)
        backend_str = self.backend.value if self.backend else "*"
        return f"<{self.dtype.value} [{shape_str}] @ {backend_str}>"
