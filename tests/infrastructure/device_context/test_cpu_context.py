import unittest
from unittest import TestCase

import numpy as np

from mlcore.domain._errors import AllocationError, BoundsError, DeviceNotSupportedError
from mlcore.domain.device._device import Device, DeviceType
from mlcore.domain.device._device_context_protocol import DeviceContextLike
from mlcore.infrastructure.device_context._cpu_context import CPUContext
from mlcore.infrastructure.device_context._registry import DeviceContextRegistry


class TestCPUContext(TestCase):
    def test_starts_empty(self):
        ctx = CPUContext()
        self.assertEqual(ctx.size(), 0)
        self.assertIsNone(ctx.get_device_ptr())
        self.assertEqual(ctx.typed_view(np.float32).size, 0)

    def test_satisfies_protocol(self):
        self.assertIsInstance(CPUContext(), DeviceContextLike)
        self.assertEqual(CPUContext.device, Device("cpu"))

    def test_allocate_sets_byte_length(self):
        ctx = CPUContext()
        ctx.allocate(6, 4)
        self.assertEqual(ctx.size(), 24)
        self.assertIsInstance(ctx.get_device_ptr(), int)

    def test_round_trip(self):
        ctx = CPUContext()
        ctx.allocate(5, 8)
        src = np.arange(5, dtype=np.float64) * 1.5
        ctx.copy_from(0, 5, 8, src)
        dst = np.zeros(5, dtype=np.float64)
        ctx.copy_to(0, 5, 8, dst)
        np.testing.assert_array_equal(dst, src)

    def test_copy_with_offset(self):
        ctx = CPUContext()
        ctx.allocate(4, 4)
        ctx.copy_from(0, 4, 4, np.zeros(4, dtype=np.float32))
        ctx.copy_from(2, 2, 4, np.array([7.0, 8.0], dtype=np.float32))
        np.testing.assert_array_equal(
            ctx.typed_view(np.float32), np.array([0, 0, 7, 8], dtype=np.float32)
        )
        out = np.empty(1, dtype=np.float32)
        ctx.copy_to(3, 1, 4, out)
        self.assertEqual(out[0], 8.0)

    def test_copy_past_extent_raises(self):
        ctx = CPUContext()
        ctx.allocate(4, 4)
        buf = np.zeros(8, dtype=np.float32)
        with self.assertRaises(BoundsError):
            ctx.copy_to(0, 5, 4, buf)
        with self.assertRaises(BoundsError):
            ctx.copy_from(3, 2, 4, buf)
        # exactly at the end is fine
        ctx.copy_from(2, 2, 4, buf)

    def test_copy_on_empty_context_raises(self):
        with self.assertRaises(BoundsError):
            CPUContext().copy_to(0, 1, 4, np.zeros(1, dtype=np.float32))

    def test_short_external_buffer_raises(self):
        ctx = CPUContext()
        ctx.allocate(4, 4)
        with self.assertRaises(BoundsError):
            ctx.copy_to(0, 4, 4, np.zeros(2, dtype=np.float32))

    def test_copy_into_bytearray(self):
        ctx = CPUContext()
        ctx.allocate(3, 1)
        ctx.copy_from(0, 3, 1, b"abc")
        out = bytearray(3)
        ctx.copy_to(0, 3, 1, out)
        self.assertEqual(bytes(out), b"abc")

    def test_clear_is_idempotent(self):
        ctx = CPUContext()
        ctx.allocate(2, 4)
        ctx.clear()
        ctx.clear()
        self.assertEqual(ctx.size(), 0)
        self.assertIsNone(ctx.get_device_ptr())

    def test_reallocate_releases_previous_buffer(self):
        ctx = CPUContext()
        ctx.allocate(2, 4)
        ctx.allocate(10, 8)
        self.assertEqual(ctx.size(), 80)

    def test_invalid_allocation_raises_and_leaves_empty(self):
        ctx = CPUContext()
        ctx.allocate(2, 4)
        with self.assertRaises(AllocationError):
            ctx.allocate(-1, 4)
        self.assertEqual(ctx.size(), 0)
        with self.assertRaises(AllocationError):
            ctx.allocate(1, 0)

    def test_typed_view_shares_memory(self):
        ctx = CPUContext()
        ctx.allocate(3, 4)
        view = ctx.typed_view(np.float32)
        view[:] = 2.0
        out = np.empty(3, dtype=np.float32)
        ctx.copy_to(0, 3, 4, out)
        np.testing.assert_array_equal(out, np.full(3, 2.0, dtype=np.float32))


class TestDeviceContextRegistry(TestCase):
    def test_cpu_registered(self):
        self.assertIs(DeviceContextRegistry.context_type_for(Device("cpu")), CPUContext)

    def test_unregistered_device_raises(self):
        with self.assertRaises(DeviceNotSupportedError):
            DeviceContextRegistry.context_type_for(Device("cuda:0"))

    def test_duplicate_registration_raises(self):
        with self.assertRaises(ValueError):
            DeviceContextRegistry.register_context(DeviceType.CPU)(CPUContext)


if __name__ == "__main__":
    unittest.main()
