# concat_split/backend/registry.py
from typing import Callable, Dict

from ..ir.dtypes import Backend, KernelUnavailableError


class KernelRegistry:
    # OpType -> Backend -> Kernel
    _kernels: Dict[str, Dict[Backend, Callable]] = {}

    @classmethod
    def get_all_kernels(cls):
        """Returns the entire kernel registry."""
        return cls._kernels

    @classmethod
    def has_kernel(cls, op_type: str, backend: Backend) -> bool:
        return backend in cls._kernels.get(op_type, {})

    @classmethod
    def register(cls, op_type: str, backend: Backend = Backend.CPU_NUMPY):
        def decorator(func):
            if op_type not in cls._kernels:
                cls._kernels[op_type] = {}
            if backend in cls._kernels[op_type]:
                raise ValueError(
                    f"Kernel registration error: '{op_type}' already has a kernel "
                    f"for backend '{backend.value}'"
                )
            cls._kernels[op_type][backend] = func
            return func

        return decorator

    @classmethod
    def select_kernel(cls, op_type: str, backend: Backend = Backend.CPU_NUMPY) -> Callable:
        kernel = cls._kernels.get(op_type, {}).get(backend)
        if kernel is None:
            raise KernelUnavailableError(
                f"No kernel registered for '{op_type}' on backend '{backend.value}'"
            )
        return kernel


from .kernels import *
