import unittest
from unittest import TestCase

import numpy as np

from mlcore.domain._errors import (
    AllocationError,
    BoundsError,
    DTypeMismatchError,
    ShapeMismatchError,
)
from mlcore.domain.device._device import Device
from mlcore.domain.types._element_type import ElementType
from mlcore.infrastructure.device_context._cpu_context import CPUContext
from mlcore.infrastructure.tensor import (
    DEFAULT_DTYPE,
    TensorBlob,
    element_type_of,
    resolve_dtype,
)


class TestDtypes(TestCase):
    def test_resolve_tags_and_dtypes(self):
        self.assertEqual(resolve_dtype("float"), np.float32)
        self.assertEqual(resolve_dtype("double"), np.float64)
        self.assertEqual(resolve_dtype(ElementType.DOUBLE), np.float64)
        self.assertEqual(resolve_dtype(np.float32), np.float32)
        self.assertEqual(resolve_dtype("float64"), np.float64)
        self.assertEqual(DEFAULT_DTYPE, np.float32)

    def test_unsupported_raises(self):
        for bad in ("int32", np.int64, "half"):
            with self.subTest(dtype=bad):
                with self.assertRaises(ValueError):
                    resolve_dtype(bad)

    def test_element_type_of(self):
        self.assertIs(element_type_of(np.float32), ElementType.FLOAT)
        self.assertIs(element_type_of("double"), ElementType.DOUBLE)


class TestTensorBlob(TestCase):
    def test_starts_empty(self):
        t = TensorBlob()
        self.assertTrue(t.is_empty())
        self.assertEqual(t.size(), 0)
        self.assertEqual(t.dims(), 0)
        self.assertEqual(t.shape, ())
        self.assertEqual(t.dtype, np.float32)
        self.assertEqual(t.device, Device("cpu"))
        self.assertIs(t.context_type, CPUContext)
        self.assertEqual(t.context.size(), 0)

    def test_resize_allocates_exact_bytes(self):
        t = TensorBlob()
        t.resize((3, 4), "double")
        self.assertEqual(t.size(), 12)
        self.assertEqual(t.dims(), 2)
        self.assertEqual((t.dim(0), t.dim(1)), (3, 4))
        self.assertEqual(t.dtype, np.float64)
        self.assertEqual(t.context.size(), 12 * 8)

    def test_dim_out_of_range_raises(self):
        t = TensorBlob((2, 3))
        with self.assertRaises(BoundsError):
            t.dim(2)
        with self.assertRaises(IndexError):
            t.dim(-1)

    def test_negative_dimension_raises(self):
        with self.assertRaises(ValueError):
            TensorBlob((2, -1))

    def test_zero_dimension_is_empty(self):
        t = TensorBlob((2, 3))
        t.resize((0, 3))
        self.assertTrue(t.is_empty())
        self.assertEqual(t.shape, ())
        self.assertEqual(t.context.size(), 0)

    def test_same_byte_length_preserves_buffer_and_contents(self):
        t = TensorBlob((2, 3))
        t.copy_from_numpy(np.arange(6, dtype=np.float32).reshape(2, 3))
        ptr = t.context.get_device_ptr()

        t.resize((3, 2))
        self.assertEqual(t.shape, (3, 2))
        self.assertEqual(t.context.get_device_ptr(), ptr)
        np.testing.assert_array_equal(
            t.to_numpy(), np.arange(6, dtype=np.float32).reshape(3, 2)
        )

    def test_different_size_reallocates(self):
        t = TensorBlob((2, 3))
        t.resize((4, 4))
        self.assertEqual(t.size(), 16)
        self.assertEqual(t.context.size(), 16 * 4)

    def test_dtype_change_reallocates(self):
        t = TensorBlob((4,), "float")
        t.resize((4,), "double")
        self.assertEqual(t.dtype, np.float64)
        self.assertEqual(t.context.size(), 32)

    def test_failed_allocation_leaves_tensor_empty(self):
        t = TensorBlob((2, 3))
        with self.assertRaises(AllocationError):
            t.resize((2**62,))
        self.assertTrue(t.is_empty())
        self.assertEqual(t.shape, ())
        self.assertEqual(t.context.size(), t.size() * t.dtype.itemsize)
        self.assertEqual(t.get_ptr_mutable(t.dtype).size, 0)

        t.resize((2, 2))
        self.assertEqual(t.context.size(), 16)

    def test_reshape_like_copies_shape_and_dtype(self):
        src = TensorBlob((2, 5), "double")
        dst = TensorBlob()
        dst.reshape_like(src)
        self.assertEqual(dst.shape, (2, 5))
        self.assertEqual(dst.dtype, np.float64)
        self.assertTrue(dst.compare_size_with(src))

    def test_compare_size_with_ignores_dimension_list(self):
        self.assertTrue(TensorBlob((2, 6)).compare_size_with(TensorBlob((12,))))
        self.assertFalse(TensorBlob((2, 6)).compare_size_with(TensorBlob((11,))))

    def test_typed_access(self):
        t = TensorBlob((3,), "double")
        mutable = t.get_ptr_mutable(np.float64)
        mutable[:] = [1.0, 2.0, 3.0]
        const = t.get_ptr_const("double")
        np.testing.assert_array_equal(const, [1.0, 2.0, 3.0])
        with self.assertRaises(ValueError):
            const[0] = 5.0

    def test_typed_access_with_wrong_dtype_raises(self):
        t = TensorBlob((3,), "float")
        with self.assertRaises(DTypeMismatchError):
            t.get_ptr_mutable(np.float64)
        with self.assertRaises(DTypeMismatchError):
            t.get_ptr_const("double")

    def test_set_by_const(self):
        t = TensorBlob((2, 2))
        t.set_by_const(3.5)
        np.testing.assert_array_equal(t.to_numpy(), np.full((2, 2), 3.5, np.float32))
        t.get_ptr_mutable(np.float32)[0] = np.nan
        t.set_by_const(0)
        np.testing.assert_array_equal(t.to_numpy(), np.zeros((2, 2), np.float32))

    def test_copy_from_numpy_sizes_empty_tensor(self):
        t = TensorBlob(dtype="double")
        t.copy_from_numpy([[1, 2, 3], [4, 5, 6]])
        self.assertEqual(t.shape, (2, 3))
        self.assertEqual(t.to_numpy().dtype, np.float64)
        np.testing.assert_array_equal(t.to_numpy(), [[1, 2, 3], [4, 5, 6]])

    def test_copy_from_numpy_size_mismatch_raises(self):
        t = TensorBlob((2, 2))
        with self.assertRaises(ShapeMismatchError):
            t.copy_from_numpy(np.zeros(5))

    def test_data_is_a_shaped_view(self):
        t = TensorBlob((2, 2))
        t.data()[1, 1] = 9.0
        self.assertEqual(t.to_numpy()[1, 1], 9.0)

    def test_to_numpy_is_a_copy(self):
        t = TensorBlob((2,))
        t.set_by_const(1)
        out = t.to_numpy()
        out[:] = 7
        np.testing.assert_array_equal(t.to_numpy(), [1, 1])

    def test_clear(self):
        t = TensorBlob((2, 2))
        t.clear()
        self.assertTrue(t.is_empty())
        self.assertIsNone(t.context.get_device_ptr())
        self.assertEqual(t.to_numpy().size, 0)


if __name__ == "__main__":
    unittest.main()
