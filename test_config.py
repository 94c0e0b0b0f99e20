import os
import unittest
from unittest import mock

import config


class TestParsePositiveInt(unittest.TestCase):

    def test_accepts_ints_and_numeric_strings(self):
        self.assertEqual(config.parse_positive_int(7), 7)
        self.assertEqual(config.parse_positive_int("12"), 12)
        self.assertEqual(config.parse_positive_int(" 3 "), 3)

    def test_rejects_non_positive_and_non_numeric(self):
        for value in (0, -5, "0", "-1", "ten", "", "2.5", True, None):
            with self.subTest(value=value):
                with self.assertRaises(ValueError):
                    config.parse_positive_int(value)


class TestEnvOverrides(unittest.TestCase):

    def test_unset_env_uses_default(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            self.assertEqual(config._env_positive_int("COMMITSCAN_THRESHOLD", 10), 10)

    def test_valid_env_value(self):
        with mock.patch.dict(os.environ, {"COMMITSCAN_THRESHOLD": "25"}):
            self.assertEqual(config._env_positive_int("COMMITSCAN_THRESHOLD", 10), 25)

    def test_non_positive_env_value_falls_back_with_warning(self):
        for raw in ("0", "-3", "ten"):
            with self.subTest(raw=raw):
                with mock.patch.dict(os.environ, {"COMMITSCAN_THRESHOLD": raw}), \
                        self.assertLogs("config", level="WARNING") as logs:
                    self.assertEqual(config._env_positive_int("COMMITSCAN_THRESHOLD", 10), 10)
                self.assertIn("COMMITSCAN_THRESHOLD", logs.output[0])


if __name__ == "__main__":
    unittest.main()
