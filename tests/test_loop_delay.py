import asyncio
import time
import unittest

from procstats.runtime.loop_delay import LoopDelayMonitor


class LoopDelayMonitorTest(unittest.IsolatedAsyncioTestCase):
    async def test_enable_once_disable_once(self):
        monitor = LoopDelayMonitor()
        self.assertTrue(monitor.enable())
        self.assertFalse(monitor.enable())
        self.assertTrue(monitor.enabled)

        await asyncio.sleep(0.1)
        self.assertGreater(monitor.snapshot()["count"], 0)

        self.assertTrue(monitor.disable())
        self.assertFalse(monitor.disable())
        await monitor.wait_closed()
        self.assertFalse(monitor.enabled)
        self.assertTrue(monitor.closed)

        count = monitor.snapshot()["count"]
        await asyncio.sleep(0.05)
        self.assertEqual(monitor.snapshot()["count"], count)

    async def test_cannot_enable_after_close(self):
        monitor = LoopDelayMonitor()
        monitor.disable()
        await monitor.wait_closed()
        self.assertFalse(monitor.enable())

    async def test_blocking_the_loop_shows_up_as_delay(self):
        monitor = LoopDelayMonitor(resolution_ms=10)
        monitor.enable()
        await asyncio.sleep(0.02)
        # Block the loop without yielding
        time.sleep(0.1)
        await asyncio.sleep(0.03)
        monitor.disable()
        await monitor.wait_closed()
        self.assertGreaterEqual(monitor.snapshot()["max"], 50.0)


class LoopDelayStatsTest(unittest.TestCase):
    def test_empty_snapshot(self):
        snap = LoopDelayMonitor().snapshot()
        self.assertEqual(snap["count"], 0)
        self.assertEqual(snap["p99"], 0.0)

    def test_percentiles(self):
        monitor = LoopDelayMonitor()
        for v in range(1, 101):
            monitor.record(v)
        snap = monitor.snapshot()
        self.assertEqual(snap["count"], 100)
        self.assertEqual(snap["min"], 1.0)
        self.assertEqual(snap["max"], 100.0)
        self.assertAlmostEqual(snap["mean"], 50.5)
        self.assertEqual(snap["p50"], 50.0)
        self.assertEqual(snap["p90"], 90.0)
        self.assertEqual(snap["p99"], 99.0)

    def test_negative_samples_floor_at_zero(self):
        monitor = LoopDelayMonitor()
        monitor.record(-3)
        self.assertEqual(monitor.snapshot()["min"], 0.0)

    def test_resolution_must_be_positive(self):
        with self.assertRaises(ValueError):
            LoopDelayMonitor(resolution_ms=0)

    def test_enable_requires_running_loop(self):
        with self.assertRaises(RuntimeError):
            LoopDelayMonitor().enable()


if __name__ == "__main__":
    unittest.main()
