import torch

from ...ir.dtypes import Backend, KernelUnavailableError
from ...ops.atomic_types import OpType
from ..registry import KernelRegistry
from .concat import concat_kernel
from .split import split_by_lengths_kernel, split_kernel

_KERNELS = {
    OpType.SPLIT: split_kernel,
    OpType.SPLIT_BY_LENGTHS: split_by_lengths_kernel,
    OpType.CONCAT: concat_kernel,
}

if torch.cuda.is_available():
    # The kernels are device agnostic; the CUDA context does the copies.
    for _op_type, _kernel in _KERNELS.items():
        KernelRegistry.register(_op_type, Backend.GPU_TORCH)(_kernel)
else:

    def _cuda_unavailable(inputs, attrs, context):
        raise KernelUnavailableError("CUDA is not available for the gpu_torch backend")

    for _op_type in _KERNELS:
        KernelRegistry.register(_op_type, Backend.GPU_TORCH)(_cuda_unavailable)
