from ...ir.dtypes import Backend
from ...ops.atomic_types import OpType
from ...ops.axis import resolve_axis_attrs
from ..executor import concat
from ..registry import KernelRegistry


@KernelRegistry.register(OpType.CONCAT, Backend.CPU_TORCH)
@KernelRegistry.register(OpType.CONCAT, Backend.CPU_NUMPY)
def concat_kernel(inputs, attrs, context):
    """
    Concatenation of any number of tensors.
    inputs: Tensors (same rank and dtype)
    attrs['axis'] / attrs['order'], attrs['add_axis']
    Returns [output, split_sizes]; split_sizes is a host INT32 array.
    """
    if not inputs:
        raise ValueError("Concat requires at least one input")

    axis, add_axis = resolve_axis_attrs(attrs)
    output, split_sizes = concat(inputs, axis, add_axis, context)
    return [output.view(), split_sizes.view()]
