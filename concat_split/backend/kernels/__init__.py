# Import kernels
from . import split
from . import concat
from . import gpu_torch

__all__ = [
    "split",
    "concat",
    "gpu_torch",
]
