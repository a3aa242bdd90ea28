from .dtypes import DType, Backend, TensorSignature, KernelUnavailableError
from .buffer import TensorBuffer, as_buffer

__all__ = [
    "DType",
    "Backend",
    "TensorSignature",
    "KernelUnavailableError",
    "TensorBuffer",
    "as_buffer",
]
