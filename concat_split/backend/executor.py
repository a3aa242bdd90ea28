# concat_split/backend/executor.py
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from ..config import DEBUG_EXECUTION
from ..ir.buffer import TensorBuffer, as_buffer
from ..ir.dtypes import Backend, DType
from ..ops.planning import (
    ConcatPlan,
    SplitPlan,
    SplitSpec,
    plan_concat,
    plan_split,
    plan_split_by_lengths,
)
from .copy import copy_block
from .memory import DeviceContext, get_context


def _resolve_context(
    buffers: Sequence[TensorBuffer], context: Optional[DeviceContext]
) -> Tuple[DeviceContext, List[TensorBuffer]]:
    if context is None:
        context = get_context(buffers[0].backend)
    return context, [context.adopt(b) for b in buffers]


def _scatter(
    context: DeviceContext, data: TensorBuffer, plan: SplitPlan
) -> List[TensorBuffer]:
    # Every output is allocated at its final shape before any byte moves.
    outputs = [context.allocate(shape, data.dtype) for shape in plan.output_shapes]

    item_size = data.itemsize
    layout = plan.layout
    src_row_stride = layout.axis_extent * layout.after * item_size
    offset = 0
    for i, (out, extent) in enumerate(zip(outputs, plan.extents)):
        run_length = extent * layout.after * item_size
        if DEBUG_EXECUTION:
            print(
                f"[split] output {i}: extent={extent} rows={layout.before} "
                f"run={run_length}B src_offset={offset}B"
            )
        copy_block(
            context,
            item_size,
            layout.before,
            run_length,
            data.storage,
            offset,
            src_row_stride,
            out.storage,
            0,
            run_length,
            data.dtype.is_trivially_copyable,
        )
        offset += run_length
    return outputs


def split(
    data: Any,
    axis: int,
    output_count: int,
    split_spec: Optional[SplitSpec] = None,
    add_axis: bool = False,
    context: Optional[DeviceContext] = None,
) -> List[TensorBuffer]:
    """
    Splits `data` along `axis` into `output_count` arrays.

    split_spec: equal division (default), explicit sizes or external sizes.
    add_axis: each output takes one slice and the split axis is removed.
    """
    context, (buf,) = _resolve_context([as_buffer(data)], context)
    plan = plan_split(buf.signature, axis, output_count, split_spec or SplitSpec.equal(), add_axis)
    if DEBUG_EXECUTION:
        print(f"[split] {buf.signature} axis={plan.axis} extents={list(plan.extents)}")
    return _scatter(context, buf, plan)


def split_by_lengths(
    data: Any,
    axis: int,
    lengths: Any,
    output_count: int,
    context: Optional[DeviceContext] = None,
) -> List[TensorBuffer]:
    """
    Splits `data` along `axis`; output i takes the sum of the i-th equally
    sized group of `lengths`.
    """
    context, (buf,) = _resolve_context([as_buffer(data)], context)
    plan = plan_split_by_lengths(buf.signature, axis, lengths, output_count)
    if DEBUG_EXECUTION:
        print(
            f"[split_by_lengths] {buf.signature} axis={plan.axis} extents={list(plan.extents)}"
        )
    return _scatter(context, buf, plan)


def _gather(
    context: DeviceContext, inputs: List[TensorBuffer], plan: ConcatPlan
) -> TensorBuffer:
    output = context.allocate(plan.output_shape, inputs[0].dtype)

    item_size = inputs[0].itemsize
    layout = plan.layout
    dst_row_stride = layout.axis_extent * layout.after * item_size
    offset = 0
    for i, (src, extent) in enumerate(zip(inputs, plan.extents)):
        run_length = extent * layout.after * item_size
        if DEBUG_EXECUTION:
            print(
                f"[concat] input {i}: extent={extent} rows={layout.before} "
                f"run={run_length}B dst_offset={offset}B"
            )
        copy_block(
            context,
            item_size,
            layout.before,
            run_length,
            src.storage,
            0,
            run_length,
            output.storage,
            offset,
            dst_row_stride,
            src.dtype.is_trivially_copyable,
        )
        offset += run_length
    return output


def concat(
    inputs: Sequence[Any],
    axis: int,
    add_axis: bool = False,
    context: Optional[DeviceContext] = None,
) -> Tuple[TensorBuffer, TensorBuffer]:
    """
    Concatenates `inputs` along `axis`, or stacks them along a new axis
    when `add_axis` is set.

    Returns the output and a host INT32 array with each input's extent
    along the axis, which splits the output back into the inputs.
    """
    if len(inputs) == 0:
        raise ValueError("Concat requires at least one input")
    context, buffers = _resolve_context([as_buffer(x) for x in inputs], context)
    plan = plan_concat([b.signature for b in buffers], axis, add_axis)
    if DEBUG_EXECUTION:
        print(
            f"[concat] {len(buffers)} inputs axis={plan.axis} -> {plan.output_shape}"
        )

    host = get_context(Backend.CPU_NUMPY)
    split_sizes = host.allocate((len(buffers),), DType.INT32)
    split_sizes.view()[:] = np.asarray(plan.extents, dtype=np.int32)

    return _gather(context, buffers, plan), split_sizes


def run_kernel(
    op_type: str,
    inputs: Sequence[Any],
    attrs: Optional[Dict[str, Any]] = None,
    backend: Optional[Backend] = None,
) -> List[Any]:
    """
    Runs the registered kernel for `op_type`. The backend defaults to the
    backend of the first input.
    """
    from .registry import KernelRegistry

    if not inputs:
        raise ValueError(f"{op_type} requires at least one input")
    if backend is None:
        backend = as_buffer(inputs[0]).backend
    kernel = KernelRegistry.select_kernel(op_type, backend)
    return kernel(list(inputs), attrs or {}, get_context(backend))
