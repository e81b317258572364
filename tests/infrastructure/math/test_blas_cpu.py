import unittest
from unittest import TestCase

import numpy as np

from mlcore.domain._errors import BoundsError, DeviceNotSupportedError
from mlcore.infrastructure.device_context._cpu_context import CPUContext
from mlcore.infrastructure.math import BlasKernels, axpy, gemm, gemv, scal


class TestGemmCPU(TestCase):
    def setUp(self):
        self.rng = np.random.default_rng(0)

    def _check(self, trans_a: bool, trans_b: bool, dtype) -> None:
        m, n, k = 3, 4, 5
        op_a = self.rng.standard_normal((m, k)).astype(dtype)
        op_b = self.rng.standard_normal((k, n)).astype(dtype)
        a = np.ascontiguousarray(op_a.T if trans_a else op_a)
        b = np.ascontiguousarray(op_b.T if trans_b else op_b)
        c0 = self.rng.standard_normal((m, n)).astype(dtype)
        c = c0.copy().reshape(-1)

        lda = m if trans_a else k
        ldb = k if trans_b else n
        gemm(trans_a, trans_b, m, n, k, 2.0, a.reshape(-1), lda, b.reshape(-1),
             ldb, 0.5, c, n)

        expected = 2.0 * (op_a.astype(np.float64) @ op_b) + 0.5 * c0
        tol = 1e-4 if np.dtype(dtype) == np.float32 else 1e-10
        np.testing.assert_allclose(c.reshape(m, n), expected, rtol=tol, atol=tol)

    def test_all_transpose_combinations(self):
        for dtype in (np.float32, np.float64):
            for trans_a in (False, True):
                for trans_b in (False, True):
                    with self.subTest(dtype=dtype, trans_a=trans_a, trans_b=trans_b):
                        self._check(trans_a, trans_b, dtype)

    def test_beta_zero_ignores_destination(self):
        a = np.ones(4, dtype=np.float64)
        b = np.ones(4, dtype=np.float64)
        c = np.full(4, np.nan, dtype=np.float64)
        gemm(False, False, 2, 2, 2, 1.0, a, 2, b, 2, 0.0, c, 2)
        np.testing.assert_array_equal(c, np.full(4, 2.0))

    def test_rank_one_update(self):
        ones = np.ones(3, dtype=np.float32)
        bias = np.array([1, 2], dtype=np.float32)
        c = np.zeros(6, dtype=np.float32)
        gemm(False, False, 3, 2, 1, 1.0, ones, 1, bias, 2, 1.0, c, 2)
        np.testing.assert_array_equal(c.reshape(3, 2), np.tile(bias, (3, 1)))

    def test_short_buffer_raises(self):
        a = np.ones(3, dtype=np.float32)
        b = np.ones(4, dtype=np.float32)
        c = np.zeros(4, dtype=np.float32)
        with self.assertRaises(BoundsError):
            gemm(False, False, 2, 2, 2, 1.0, a, 2, b, 2, 0.0, c, 2)


class TestGemvCPU(TestCase):
    def setUp(self):
        self.a = np.arange(6, dtype=np.float64)  # 2x3
        self.a_mat = self.a.reshape(2, 3)

    def test_no_transpose(self):
        x = np.array([1.0, 2.0, 3.0])
        y = np.zeros(2)
        gemv(False, 2, 3, 1.0, self.a, 3, x, 0.0, y, 1)
        np.testing.assert_allclose(y, self.a_mat @ x)

    def test_transpose(self):
        x = np.array([1.0, -1.0])
        y = np.ones(3)
        gemv(True, 2, 3, 2.0, self.a, 3, x, 1.0, y, 1)
        np.testing.assert_allclose(y, 2.0 * (self.a_mat.T @ x) + 1.0)

    def test_column_sums(self):
        ones = np.ones(2)
        y = np.full(3, np.nan)
        gemv(True, 2, 3, 1.0, self.a, 3, ones, 0.0, y, 1)
        np.testing.assert_allclose(y, self.a_mat.sum(axis=0))


class TestVectorKernelsCPU(TestCase):
    def test_axpy(self):
        x = np.array([1, 2, 3], dtype=np.float32)
        y = np.array([10, 20, 30], dtype=np.float32)
        axpy(3, -1.0, x, y)
        np.testing.assert_array_equal(y, np.array([9, 18, 27], dtype=np.float32))

    def test_axpy_prefix_only(self):
        x = np.ones(4)
        y = np.zeros(4)
        axpy(2, 1.0, x, y)
        np.testing.assert_array_equal(y, [1, 1, 0, 0])

    def test_scal(self):
        x = np.array([1.0, -2.0, 4.0])
        y = np.empty(3)
        scal(3, 0.5, x, y)
        np.testing.assert_array_equal(y, [0.5, -1.0, 2.0])

    def test_scal_in_place(self):
        x = np.array([2.0, 4.0], dtype=np.float32)
        scal(2, 0.25, x, x)
        np.testing.assert_array_equal(x, np.array([0.5, 1.0], dtype=np.float32))

    def test_scal_zero_writes_exact_zeros(self):
        x = np.array([np.nan, np.inf, -np.inf, 1.0])
        y = np.full(4, np.nan)
        scal(4, 0.0, x, y)
        np.testing.assert_array_equal(y, np.zeros(4))

    def test_short_vector_raises(self):
        with self.assertRaises(BoundsError):
            axpy(5, 1.0, np.ones(3), np.ones(5))


class TestBlasKernelsRegistry(TestCase):
    def test_cpu_kernels_registered(self):
        keys = set(BlasKernels.available())
        for name in ("gemm", "gemv", "axpy", "scal"):
            for dtype in (np.float32, np.float64):
                with self.subTest(name=name, dtype=dtype):
                    self.assertIn((name, np.dtype(dtype), CPUContext), keys)

    def test_unsupported_dtype_raises(self):
        x = np.ones(2, dtype=np.int32)
        with self.assertRaises(DeviceNotSupportedError):
            scal(2, 2.0, x, x)

    def test_unsupported_context_raises(self):
        class OtherContext:
            pass

        with self.assertRaises(DeviceNotSupportedError):
            scal(2, 2.0, np.ones(2), np.ones(2), context=OtherContext)

    def test_duplicate_registration_raises(self):
        with self.assertRaises(ValueError):
            BlasKernels.register_kernel("scal", np.float32, CPUContext)(lambda *a: None)


if __name__ == "__main__":
    unittest.main()
