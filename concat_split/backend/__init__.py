from .memory import DeviceContext, get_context, register_context
from .copy import copy_block
from .executor import split, split_by_lengths, concat, run_kernel

__all__ = [
    "DeviceContext",
    "get_context",
    "register_context",
    "copy_block",
    "split",
    "split_by_lengths",
    "concat",
    "run_kernel",
]
