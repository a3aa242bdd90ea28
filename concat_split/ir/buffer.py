import math
from dataclasses import dataclass
from typing import Any, Tuple

import numpy as np
import torch

from .dtypes import Backend, DType, TensorSignature


@dataclass(eq=False)
class TensorBuffer:
    """
    Handle to a contiguous array: flat storage plus shape and element type.

    Trivially copyable dtypes keep their data in a flat uint8 byte slab
    (a numpy array or a torch tensor). Dtypes holding python objects keep a
    flat numpy array of their own dtype with one slot per element.
    """

    storage: Any
    shape: Tuple[int, ...]
    dtype: DType
    backend: Backend = Backend.CPU_NUMPY

    def __post_init__(self):
        self.shape = tuple(int(d) for d in self.shape)

    @property
    def rank(self) -> int:
        return len(self.shape)

    @property
    def numel(self) -> int:
        return math.prod(self.shape)

    @property
    def itemsize(self) -> int:
        return self.dtype.itemsize

    @property
    def nbytes(self) -> int:
        return self.numel * self.itemsize

    @property
    def is_torch(self) -> bool:
        return isinstance(self.storage, torch.Tensor)

    @property
    def signature(self) -> TensorSignature:
        return TensorSignature(self.dtype, self.shape, self.backend)

    def dim(self, axis: int) -> int:
        return self.shape[axis]

    def size_to_dim(self, k: int) -> int:
        """Product of the dimensions strictly before `k`."""
        return math.prod(self.shape[:k])

    def size_from_dim(self, k: int) -> int:
        """Product of the dimensions from `k` onward."""
        return math.prod(self.shape[k:])

    def view(self) -> Any:
        """Typed, shaped array sharing this buffer's storage."""
        if self.is_torch:
            return self.storage.view(self.dtype.to_torch()).reshape(self.shape)
        if not self.dtype.is_trivially_copyable:
            return self.storage.reshape(self.shape)
        return self.storage.view(self.dtype.to_numpy()).reshape(self.shape)

    def to_numpy(self) -> np.ndarray:
        data = self.view()
        if isinstance(data, torch.Tensor):
            return data.detach().cpu().numpy()
        return data

    @classmethod
    def from_numpy(cls, data: np.ndarray) -> "TensorBuffer":
        data = np.asarray(data, order="C")
        dtype = DType.from_numpy(data.dtype)
        flat = data.reshape(-1)
        if dtype.is_trivially_copyable:
            flat = flat.view(np.uint8)
        return cls(flat, data.shape, dtype, Backend.CPU_NUMPY)

    @classmethod
    def from_torch(cls, data: torch.Tensor) -> "TensorBuffer":
        dtype = DType.from_torch(data.dtype)
        backend = Backend.GPU_TORCH if data.is_cuda else Backend.CPU_TORCH
        flat = data.detach().contiguous().reshape(-1).view(torch.uint8)
        return cls(flat, tuple(data.shape), dtype, backend)

    def __repr__(self):
        return f"TensorBuffer({self.signature!r})"


def as_buffer(data: Any) -> TensorBuffer:
    """Wraps numpy arrays, torch tensors and python sequences; buffers pass through."""
    if isinstance(data, TensorBuffer):
        return data
    if isinstance(data, torch.Tensor):
        return TensorBuffer.from_torch(data)
    return TensorBuffer.from_numpy(np.asarray(data))
