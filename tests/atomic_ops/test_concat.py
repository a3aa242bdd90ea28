import pytest
import numpy as np
import torch
from concat_split import (
    concat,
    split,
    SplitSpec,
    DType,
    Backend,
    ShapeMismatchError,
    AxisOutOfRangeError,
)


def test_concat_vectors():
    val_a = np.array([1, 2, 3], dtype=np.float32)
    val_b = np.array([4, 5], dtype=np.float32)

    res, sizes = concat([val_a, val_b], 0)

    expected = np.array([1, 2, 3, 4, 5], dtype=np.float32)
    np.testing.assert_array_equal(res.to_numpy(), expected)
    np.testing.assert_array_equal(sizes.to_numpy(), [3, 2])


def test_concat_matrices_axis_0():
    """Test concatenating two matrices along axis 0 (rows)."""
    # (2, 3) + (1, 3) -> (3, 3)
    val_a = np.zeros((2, 3), dtype=np.float32)
    val_b = np.ones((1, 3), dtype=np.float32)

    res, _ = concat([val_a, val_b], 0)

    expected = np.array([[0, 0, 0], [0, 0, 0], [1, 1, 1]], dtype=np.float32)
    np.testing.assert_array_equal(res.to_numpy(), expected)
    assert res.shape == (3, 3)


def test_concat_matrices_axis_1():
    """Test concatenating two matrices along axis 1 (columns)."""
    # (2, 2) + (2, 1) -> (2, 3)
    val_a = np.full((2, 2), 1.0, dtype=np.float32)
    val_b = np.full((2, 1), 2.0, dtype=np.float32)

    res, _ = concat([val_a, val_b], 1)

    expected = np.array([[1, 1, 2], [1, 1, 2]], dtype=np.float32)
    np.testing.assert_array_equal(res.to_numpy(), expected)


def test_concat_records_split_sizes():
    rng = np.random.default_rng(1)
    inputs = [rng.random((3, n, 2)).astype(np.float32) for n in (4, 2, 6)]

    res, sizes = concat(inputs, 1)

    assert res.shape == (3, 12, 2)
    assert sizes.dtype == DType.INT32
    assert sizes.backend == Backend.CPU_NUMPY
    np.testing.assert_array_equal(sizes.to_numpy(), [4, 2, 6])
    np.testing.assert_array_equal(res.to_numpy(), np.concatenate(inputs, axis=1))

    # Splitting with the recorded sizes gives the inputs back.
    parts = split(res, 1, 3, SplitSpec.external(sizes))
    for part, expected in zip(parts, inputs):
        np.testing.assert_array_equal(part.to_numpy(), expected)


def test_concat_negative_axis():
    a = np.arange(6, dtype=np.int32).reshape(2, 3)
    b = np.arange(4, dtype=np.int32).reshape(2, 2)

    res, _ = concat([a, b], -1)

    np.testing.assert_array_equal(res.to_numpy(), np.concatenate([a, b], axis=-1))


def test_concat_single_input():
    a = np.arange(6, dtype=np.float32).reshape(3, 2)

    res, sizes = concat([a], 0)

    np.testing.assert_array_equal(res.to_numpy(), a)
    np.testing.assert_array_equal(sizes.to_numpy(), [3])


def test_concat_zero_extent_input():
    a = np.zeros((2, 0), dtype=np.float32)
    b = np.ones((2, 3), dtype=np.float32)

    res, sizes = concat([a, b], 1)

    np.testing.assert_array_equal(res.to_numpy(), b)
    np.testing.assert_array_equal(sizes.to_numpy(), [0, 3])


def test_concat_add_axis_stacks():
    inputs = [np.full((2, 3), i, dtype=np.float32) for i in range(4)]

    res, sizes = concat(inputs, 1, add_axis=True)

    assert res.shape == (2, 4, 3)
    np.testing.assert_array_equal(res.to_numpy(), np.stack(inputs, axis=1))
    np.testing.assert_array_equal(sizes.to_numpy(), [1, 1, 1, 1])


def test_concat_add_axis_last_position():
    """With a new axis, -1 addresses the position after the last input axis."""
    inputs = [np.arange(6, dtype=np.int32).reshape(2, 3) + 10 * i for i in range(2)]

    res, _ = concat(inputs, -1, add_axis=True)

    np.testing.assert_array_equal(res.to_numpy(), np.stack(inputs, axis=-1))


def test_concat_add_axis_inverts_split_add_axis():
    data = np.arange(24, dtype=np.float32).reshape(2, 3, 4)

    parts = split(data, -1, 4, add_axis=True)
    res, _ = concat(parts, -1, add_axis=True)

    np.testing.assert_array_equal(res.to_numpy(), data)


def test_concat_add_axis_scalars():
    scalars = [np.array(v, dtype=np.float64) for v in (1.5, 2.5, 3.5)]

    res, _ = concat(scalars, 0, add_axis=True)
    assert res.shape == (3,)
    np.testing.assert_array_equal(res.to_numpy(), [1.5, 2.5, 3.5])

    back = split(res, 0, 3, add_axis=True)
    assert [b.shape for b in back] == [(), (), ()]
    assert back[1].to_numpy() == 2.5


def test_concat_scalars_without_add_axis_fails():
    with pytest.raises(AxisOutOfRangeError):
        concat([np.float32(1.0), np.float32(2.0)], 0)


def test_concat_shape_mismatch():
    a = np.zeros((2, 3), dtype=np.float32)
    b = np.zeros((2, 4), dtype=np.float32)

    with pytest.raises(ShapeMismatchError) as exc:
        concat([a, b], 0)

    assert exc.value.input_index == 1
    assert exc.value.axis == 1
    assert exc.value.expected == 3
    assert exc.value.actual == 4


def test_concat_add_axis_checks_every_axis():
    a = np.zeros((2, 3), dtype=np.float32)
    b = np.zeros((3, 3), dtype=np.float32)

    with pytest.raises(ShapeMismatchError) as exc:
        concat([a, b], 0, add_axis=True)
    assert exc.value.axis == 0


def test_concat_dtype_mismatch():
    a = np.zeros((2, 2), dtype=np.float32)
    b = np.zeros((2, 2), dtype=np.int32)

    with pytest.raises(ShapeMismatchError) as exc:
        concat([a, b], 0)
    assert exc.value.expected == DType.FP32
    assert exc.value.actual == DType.INT32


def test_concat_string_width_mismatch():
    a = np.array(["ab"], dtype="<U3")
    b = np.array(["abcde"], dtype="<U5")

    with pytest.raises(ShapeMismatchError) as exc:
        concat([a, b], 0)
    assert exc.value.expected == DType("<U3")
    assert exc.value.actual == DType("<U5")


def test_concat_rank_mismatch():
    with pytest.raises(ShapeMismatchError):
        concat([np.zeros((2, 2)), np.zeros((2, 2, 1))], 0)


def test_concat_requires_inputs():
    with pytest.raises(ValueError):
        concat([], 0)


def test_concat_object_arrays():
    a = np.array([["x"], ["y"]], dtype=object)
    b = np.array([["z", {"k": 1}], ["w", None]], dtype=object)

    res, _ = concat([a, b], 1)

    assert res.dtype == DType.OBJECT
    out = res.to_numpy()
    assert out.shape == (2, 3)
    assert out[0, 0] == "x" and out[0, 2] == {"k": 1} and out[1, 2] is None
    assert out[0, 2] is not b[0, 1]


def test_concat_torch_cpu():
    a = torch.ones(2, 3, dtype=torch.int64)
    b = torch.zeros(2, 1, dtype=torch.int64)

    res, sizes = concat([a, b], 1)

    assert res.backend == Backend.CPU_TORCH
    assert torch.equal(res.view(), torch.cat([a, b], dim=1))
    np.testing.assert_array_equal(sizes.to_numpy(), [3, 1])


def test_concat_mixed_backends_follow_first_input():
    a = torch.arange(4, dtype=torch.float32).reshape(2, 2)
    b = np.full((2, 2), 7.0, dtype=np.float32)

    res, _ = concat([a, b], 0)

    assert res.backend == Backend.CPU_TORCH
    np.testing.assert_array_equal(
        res.to_numpy(), np.concatenate([a.numpy(), b], axis=0)
    )


@pytest.mark.skipif(not torch.cuda.is_available(), reason="CUDA not available")
def test_concat_gpu():
    a = torch.rand(3, 2, device="cuda")
    b = torch.rand(3, 5, device="cuda")

    res, sizes = concat([a, b], 1)

    assert res.backend == Backend.GPU_TORCH
    assert torch.equal(res.view(), torch.cat([a, b], dim=1))
    np.testing.assert_array_equal(sizes.to_numpy(), [2, 5])
