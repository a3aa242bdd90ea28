from ...ir.dtypes import Backend
from ...ops.atomic_types import OpType
from ...ops.axis import resolve_axis_attrs
from ...ops.errors import ConfigConflictError
from ...ops.planning import SplitSpec
from ..executor import split, split_by_lengths
from ..registry import KernelRegistry


def _num_outputs(op_type, attrs):
    if "num_outputs" not in attrs:
        raise ValueError(f"{op_type} requires 'num_outputs' in attributes")
    return int(attrs["num_outputs"])


@KernelRegistry.register(OpType.SPLIT, Backend.CPU_TORCH)
@KernelRegistry.register(OpType.SPLIT, Backend.CPU_NUMPY)
def split_kernel(inputs, attrs, context):
    """
    inputs[0]: Data tensor (Any Rank)
    inputs[1]: Split sizes (optional, 1D INT32, read on the host)
    attrs['axis'] / attrs['order'], attrs['add_axis'], attrs['split'], attrs['num_outputs']
    """
    if len(inputs) not in (1, 2):
        raise ValueError("Split requires 1 or 2 inputs: data and optional split sizes")

    num_outputs = _num_outputs(OpType.SPLIT, attrs)
    axis, add_axis = resolve_axis_attrs(attrs)
    sizes = attrs.get("split")
    has_sizes = sizes is not None and len(sizes) > 0

    if len(inputs) == 2:
        if has_sizes:
            raise ConfigConflictError(
                "Split sizes were given both as an input and in the 'split' attribute"
            )
        spec = SplitSpec.external(inputs[1])
    elif has_sizes:
        spec = SplitSpec.explicit(sizes)
    else:
        spec = SplitSpec.equal()

    outputs = split(inputs[0], axis, num_outputs, spec, add_axis, context)
    return [out.view() for out in outputs]


@KernelRegistry.register(OpType.SPLIT_BY_LENGTHS, Backend.CPU_TORCH)
@KernelRegistry.register(OpType.SPLIT_BY_LENGTHS, Backend.CPU_NUMPY)
def split_by_lengths_kernel(inputs, attrs, context):
    """
    inputs[0]: Data tensor (Any Rank)
    inputs[1]: Lengths (1D INT32, read on the host)
    attrs['axis'] / attrs['order'], attrs['num_outputs']
    """
    if len(inputs) != 2:
        raise ValueError("SplitByLengths requires exactly 2 inputs: data and lengths")

    num_outputs = _num_outputs(OpType.SPLIT_BY_LENGTHS, attrs)
    axis, _ = resolve_axis_attrs(attrs)
    outputs = split_by_lengths(inputs[0], axis, inputs[1], num_outputs, context)
    return [out.view() for out in outputs]
