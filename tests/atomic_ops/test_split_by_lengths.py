import pytest
import numpy as np
import torch
from concat_split import (
    split_by_lengths,
    TensorBuffer,
    LengthCountMismatchError,
    SplitSumMismatchError,
)


def test_split_by_lengths_groups():
    """lengths [2, 3, 1, 4] over 2 outputs -> groups (2+3, 1+4)."""
    data = np.arange(20, dtype=np.float32).reshape(10, 2)

    first, second = split_by_lengths(data, 0, [2, 3, 1, 4], 2)

    assert first.shape == (5, 2)
    assert second.shape == (5, 2)
    np.testing.assert_array_equal(first.to_numpy(), data[:5])
    np.testing.assert_array_equal(second.to_numpy(), data[5:])


def test_split_by_lengths_ragged():
    data = np.arange(18, dtype=np.int32).reshape(3, 6)
    lengths = np.array([1, 0, 2, 3], dtype=np.int32)

    outs = split_by_lengths(data, 1, lengths, 4)

    assert [o.shape for o in outs] == [(3, 1), (3, 0), (3, 2), (3, 3)]
    np.testing.assert_array_equal(outs[2].to_numpy(), data[:, 1:3])
    np.testing.assert_array_equal(outs[3].to_numpy(), data[:, 3:])


def test_split_by_lengths_buffer_lengths():
    data = np.arange(6, dtype=np.int64)
    lengths = TensorBuffer.from_numpy(np.array([1, 1, 2, 2], dtype=np.int32))

    a, b = split_by_lengths(data, -1, lengths, 2)

    np.testing.assert_array_equal(a.to_numpy(), [0, 1])
    np.testing.assert_array_equal(b.to_numpy(), [2, 3, 4, 5])


def test_split_by_lengths_count_not_divisible():
    data = np.zeros((6,), dtype=np.float32)
    with pytest.raises(LengthCountMismatchError) as exc:
        split_by_lengths(data, 0, [1, 2, 3], 2)
    assert exc.value.length_count == 3
    assert exc.value.output_count == 2


def test_split_by_lengths_sum_mismatch():
    data = np.zeros((10,), dtype=np.float32)
    with pytest.raises(SplitSumMismatchError) as exc:
        split_by_lengths(data, 0, [2, 3, 1, 3], 2)
    assert exc.value.expected == 10
    assert exc.value.actual == 9


def test_split_by_lengths_negative_length():
    data = np.zeros((4,), dtype=np.float32)
    with pytest.raises(SplitSumMismatchError):
        split_by_lengths(data, 0, [5, -1], 2)


def test_split_by_lengths_torch_lengths():
    data = torch.arange(12, dtype=torch.float32).reshape(2, 6)
    lengths = torch.tensor([2, 4], dtype=torch.int32)

    a, b = split_by_lengths(data, 1, lengths, 2)

    assert torch.equal(a.view(), data[:, :2])
    assert torch.equal(b.view(), data[:, 2:])
