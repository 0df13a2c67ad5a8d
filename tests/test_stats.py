"""Unit tests for client.stats -- pure functions and dataclasses."""

import unittest

from client.stats import (
    LatencyResult,
    TransferResult,
    calculate_rates,
    format_latency,
    format_speed,
    round_half_up,
)


class TestRoundHalfUp(unittest.TestCase):
    def test_half_rounds_up(self):
        self.assertEqual(round_half_up(2.5), 3)
        self.assertEqual(round_half_up(3.5), 4)

    def test_below_half(self):
        self.assertEqual(round_half_up(2.49), 2)

    def test_two_digits(self):
        self.assertAlmostEqual(round_half_up(1.125, 2), 1.13)
        self.assertAlmostEqual(round_half_up(8.192, 2), 8.19)


class TestCalculateRates(unittest.TestCase):
    def test_one_mebibyte_in_one_second(self):
        bps, kbps, mbps = calculate_rates(1024 * 1024, 1000)
        self.assertEqual(bps, 1_048_576)
        self.assertEqual(kbps, 8389)         # 8388.608
        self.assertAlmostEqual(mbps, 8.39)

    def test_conversion_identities(self):
        for size_bytes, ms in ((1_024_000, 250), (51_200, 37), (10_485_760, 1234)):
            bps, kbps, mbps = calculate_rates(size_bytes, ms)
            raw_bps = size_bytes / (ms / 1000)
            self.assertEqual(bps, round(raw_bps))
            self.assertEqual(kbps, round(raw_bps * 8 / 1000))
            self.assertAlmostEqual(mbps, round(raw_bps * 8 / 1000 / 1000, 2))

    def test_zero_duration_is_capped(self):
        self.assertEqual(calculate_rates(1000, 0), calculate_rates(1000, 1))

    def test_negative_duration_is_capped(self):
        bps, _, _ = calculate_rates(1000, -5)
        self.assertEqual(bps, 1_000_000)


class TestLatencyResult(unittest.TestCase):
    def test_calculate(self):
        r = LatencyResult(requested=5, samples=[10, 20, 15, 25, 12])
        r.calculate()
        self.assertEqual(r.min, 10)
        self.assertEqual(r.max, 25)
        self.assertEqual(r.average, 16)      # 16.4
        self.assertLessEqual(r.min, r.average)
        self.assertLessEqual(r.average, r.max)

    def test_average_rounds_half_up(self):
        r = LatencyResult(requested=2, samples=[10, 11])
        r.calculate()
        self.assertEqual(r.average, 11)

    def test_n_samples_is_requested_count(self):
        r = LatencyResult(requested=5)
        r.add_sample(30)
        r.add_failure()
        r.add_failure()
        r.add_sample(40)
        r.calculate()
        d = r.to_dict()
        self.assertEqual(d["n_samples"], 5)
        self.assertEqual(r.succeeded, 2)
        self.assertEqual(r.failed, 2)
        self.assertEqual(d["average"], 35)

    def test_failures_not_zero_filled(self):
        r = LatencyResult(requested=3, samples=[50])
        r.add_failure()
        r.add_failure()
        r.calculate()
        self.assertEqual(r.min, 50)

    def test_to_dict_keys(self):
        r = LatencyResult(requested=1, samples=[7])
        r.calculate()
        self.assertEqual(set(r.to_dict()), {"average", "min", "max", "n_samples"})

    def test_empty(self):
        r = LatencyResult(requested=3)
        r.calculate()
        self.assertEqual(r.average, 0)


class TestTransferResult(unittest.TestCase):
    def test_size_bytes_defaults_to_requested(self):
        r = TransferResult(size_kb=1000, transfer_time_ms=500)
        self.assertEqual(r.size_bytes, 1_024_000)

    def test_calculate(self):
        r = TransferResult(size_kb=1000, transfer_time_ms=1000)
        r.calculate()
        self.assertEqual(r.speed_bps, 1_024_000)
        self.assertEqual(r.speed_kbps, 8192)
        self.assertAlmostEqual(r.speed_mbps, 8.19)

    def test_to_dict_basic(self):
        r = TransferResult(size_kb=100, transfer_time_ms=100)
        r.calculate()
        d = r.to_dict()
        self.assertEqual(d["sizeKB"], 100)
        self.assertEqual(d["transferTime"], 100)
        self.assertNotIn("actualSizeKB", d)
        self.assertNotIn("serverProcessingTime", d)

    def test_to_dict_optional_fields(self):
        r = TransferResult(
            size_kb=99999, transfer_time_ms=10, size_bytes=10240 * 1024,
            actual_size_kb=10240, server_processing_time_ms=4,
        )
        r.calculate()
        d = r.to_dict()
        self.assertEqual(d["actualSizeKB"], 10240)
        self.assertEqual(d["serverProcessingTime"], 4)
        self.assertEqual(d["speedBps"], 10240 * 1024 * 100)

    def test_zero_duration_reports_measured_time(self):
        r = TransferResult(size_kb=1, transfer_time_ms=0)
        r.calculate()
        self.assertEqual(r.to_dict()["transferTime"], 0)
        self.assertGreater(r.speed_bps, 0)


class TestFormatSpeed(unittest.TestCase):
    def test_mbps(self):
        self.assertEqual(format_speed(50.0), "50.00 Mbps")

    def test_gbps(self):
        self.assertEqual(format_speed(1500.0), "1.50 Gbps")

    def test_zero(self):
        self.assertEqual(format_speed(0.0), "0.00 Mbps")


class TestFormatLatency(unittest.TestCase):
    def test_ms(self):
        self.assertEqual(format_latency(25.3), "25.3 ms")

    def test_seconds(self):
        self.assertEqual(format_latency(1500.0), "1.50 s")


if __name__ == "__main__":
    unittest.main()
