import copy
import math
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Tuple, Type

import numpy as np
import torch

from .. import config
from ..ir.buffer import TensorBuffer
from ..ir.dtypes import Backend, DType, KernelUnavailableError, get_size_bytes

DEBUG = config.DEBUG_EXECUTION and config.DEBUG_DETAILED

_CONTEXTS: Dict[Backend, Type["DeviceContext"]] = {}
_INSTANCES: Dict[Backend, "DeviceContext"] = {}


def register_context(backend: Backend):
    """Decorator to register the device context class for a backend."""

    def decorator(cls):
        cls.backend = backend
        _CONTEXTS[backend] = cls
        return cls

    return decorator


def get_context(backend: Backend) -> "DeviceContext":
    """Returns the shared context for `backend`, creating it on first use."""
    if backend not in _INSTANCES:
        cls = _CONTEXTS.get(backend)
        if cls is None:
            raise KernelUnavailableError(f"No device context for backend {backend.value}")
        _INSTANCES[backend] = cls()
    return _INSTANCES[backend]


class DeviceContext(ABC):
    """
    Memory capabilities of one compute backend.

    Storages are the flat arrays held by TensorBuffer. Byte copies address a
    uint8 slab; element copies address a flat object array.
    """

    backend: Backend

    @abstractmethod
    def allocate(self, shape: Tuple[int, ...], dtype: DType) -> TensorBuffer:
        pass

    @abstractmethod
    def adopt(self, buffer: TensorBuffer) -> TensorBuffer:
        """Returns `buffer` with storage owned by this backend, copying if needed."""
        pass

    @abstractmethod
    def copy_bytes(self, src: Any, src_offset: int, dst: Any, dst_offset: int, length: int):
        pass

    @abstractmethod
    def copy_elements(self, src: Any, src_offset: int, dst: Any, dst_offset: int, count: int):
        pass

    def copy_matrix(
        self,
        rows: int,
        row_len: int,
        src: Any,
        src_offset: int,
        src_stride: int,
        dst: Any,
        dst_offset: int,
        dst_stride: int,
        elementwise: bool = False,
    ):
        """Copies `rows` runs of `row_len` units between two strided layouts."""
        if not elementwise and config.VECTORIZED_COPY:
            src_rows = _row_view(src, rows, row_len, src_offset, src_stride)
            dst_rows = _row_view(dst, rows, row_len, dst_offset, dst_stride)
            if src_rows is not None and dst_rows is not None:
                self._assign(src_rows, dst_rows)
                return

        copy_run = self.copy_elements if elementwise else self.copy_bytes
        for i in range(rows):
            copy_run(
                src, src_offset + i * src_stride, dst, dst_offset + i * dst_stride, row_len
            )

    def _assign(self, src_rows: Any, dst_rows: Any):
        dst_rows[...] = src_rows


def _row_view(flat: Any, rows: int, row_len: int, offset: int, stride: int) -> Optional[Any]:
    """
    (rows, row_len) view of `flat` where row i starts at offset + i * stride.
    Only built when every row sits inside one stride-sized slot.
    """
    if stride < row_len or offset + row_len > stride or rows * stride > flat.shape[0]:
        return None
    return flat[: rows * stride].reshape(rows, stride)[:, offset : offset + row_len]


@register_context(Backend.CPU_NUMPY)
class NumpyContext(DeviceContext):
    def allocate(self, shape: Tuple[int, ...], dtype: DType) -> TensorBuffer:
        # torch-only dtypes such as bfloat16 raise here
        dtype.to_numpy()
        if dtype.is_trivially_copyable:
            storage = np.empty(get_size_bytes(shape, dtype), dtype=np.uint8)
        else:
            storage = np.empty(math.prod(shape), dtype=dtype.native)
        if DEBUG:
            print(f"[NumpyContext.allocate] {dtype.value} {shape} ({storage.nbytes} bytes)")
        return TensorBuffer(storage, shape, dtype, Backend.CPU_NUMPY)

    def adopt(self, buffer: TensorBuffer) -> TensorBuffer:
        if buffer.backend == Backend.CPU_NUMPY:
            return buffer
        buffer.dtype.to_numpy()
        return TensorBuffer.from_numpy(buffer.to_numpy())

    def copy_bytes(self, src, src_offset, dst, dst_offset, length):
        dst[dst_offset : dst_offset + length] = src[src_offset : src_offset + length]

    def copy_elements(self, src, src_offset, dst, dst_offset, count):
        # Elements may own mutable state, so each one is copied on its own.
        for k in range(count):
            dst[dst_offset + k] = copy.deepcopy(src[src_offset + k])


class TorchContext(DeviceContext):
    device: str = "cpu"

    def allocate(self, shape: Tuple[int, ...], dtype: DType) -> TensorBuffer:
        self._check_dtype(dtype)
        storage = torch.empty(
            get_size_bytes(shape, dtype), dtype=torch.uint8, device=self.device
        )
        if DEBUG:
            print(f"[TorchContext.allocate] {dtype.value} {shape} on {self.device}")
        return TensorBuffer(storage, shape, dtype, self.backend)

    def adopt(self, buffer: TensorBuffer) -> TensorBuffer:
        if buffer.backend == self.backend:
            return buffer
        self._check_dtype(buffer.dtype)
        if buffer.is_torch:
            storage = buffer.storage.to(self.device)
        else:
            storage = torch.from_numpy(np.array(buffer.storage)).to(self.device)
        return TensorBuffer(storage, buffer.shape, buffer.dtype, self.backend)

    def copy_bytes(self, src, src_offset, dst, dst_offset, length):
        dst[dst_offset : dst_offset + length].copy_(src[src_offset : src_offset + length])

    def copy_elements(self, src, src_offset, dst, dst_offset, count):
        raise KernelUnavailableError(
            f"Element-wise copies are not supported on {self.backend.value}"
        )

    def _assign(self, src_rows, dst_rows):
        dst_rows.copy_(src_rows)

    def _check_dtype(self, dtype: DType):
        # raises KernelUnavailableError for object and string element types
        dtype.to_torch()


@register_context(Backend.CPU_TORCH)
class TorchCPUContext(TorchContext):
    device = "cpu"


@register_context(Backend.GPU_TORCH)
class TorchGPUContext(TorchContext):
    device = "cuda"

    def __init__(self):
        if not torch.cuda.is_available():
            raise KernelUnavailableError("CUDA is not available for the gpu_torch backend")
