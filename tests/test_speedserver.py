"""Tests for the endpoint launcher and shared logging setup."""

import logging
import unittest
from unittest import mock

from logging_setup import LOG_LEVEL_ENV, configure_logging
from speedserver import build_config, parse_args


class TestBuildConfig(unittest.TestCase):
    def test_defaults(self):
        with mock.patch.dict("os.environ", {}, clear=True):
            config = build_config(parse_args([]))
        self.assertEqual(config.host, "0.0.0.0")
        self.assertEqual(config.port, 3001)
        self.assertEqual(config.max_body_bytes, 50 * 1024 * 1024)

    def test_flags_override_env(self):
        with mock.patch.dict("os.environ", {"PORT": "9000", "SPEEDTEST_HOST": "10.0.0.1"}):
            config = build_config(parse_args(["--port", "8080", "--host", "127.0.0.1",
                                              "--max-body-mb", "2"]))
        self.assertEqual(config.port, 8080)
        self.assertEqual(config.host, "127.0.0.1")
        self.assertEqual(config.max_body_bytes, 2 * 1024 * 1024)

    def test_env_used_without_flags(self):
        with mock.patch.dict("os.environ", {"PORT": "9000"}):
            self.assertEqual(build_config(parse_args([])).port, 9000)


class TestConfigureLogging(unittest.TestCase):
    def tearDown(self):
        logging.basicConfig(level=logging.WARNING, force=True)

    def test_explicit_level(self):
        configure_logging("DEBUG")
        self.assertEqual(logging.getLogger().level, logging.DEBUG)

    def test_env_level(self):
        with mock.patch.dict("os.environ", {LOG_LEVEL_ENV: "error"}):
            configure_logging()
        self.assertEqual(logging.getLogger().level, logging.ERROR)

    def test_unknown_level_falls_back(self):
        configure_logging("chatty", default="INFO")
        self.assertEqual(logging.getLogger().level, logging.INFO)


if __name__ == "__main__":
    unittest.main()
