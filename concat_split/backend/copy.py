from typing import Any

from .memory import DeviceContext


def copy_block(
    context: DeviceContext,
    item_size: int,
    before: int,
    run_length: int,
    src: Any,
    src_offset: int,
    src_row_stride: int,
    dst: Any,
    dst_offset: int,
    dst_row_stride: int,
    trivially_copyable: bool = True,
):
    """
    Copies `before` runs of `run_length` bytes.
    Run i is read at src_offset + i * src_row_stride and written at
    dst_offset + i * dst_row_stride. All offsets and strides are in bytes.

    Non trivially copyable elements are copied one element at a time, so the
    byte quantities are converted to element counts with `item_size`.
    No bounds are checked here; the planners guarantee the layout.
    """
    if before == 0 or run_length == 0:
        return

    if trivially_copyable:
        context.copy_matrix(
            before,
            run_length,
            src,
            src_offset,
            src_row_stride,
            dst,
            dst_offset,
            dst_row_stride,
        )
        return

    context.copy_matrix(
        before,
        run_length // item_size,
        src,
        src_offset // item_size,
        src_row_stride // item_size,
        dst,
        dst_offset // item_size,
        dst_row_stride // item_size,
        elementwise=True,
    )
