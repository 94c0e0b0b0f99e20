import argparse
import os
import tempfile
import unittest
from unittest import mock

import cli
from config import GlobalConfig
from errors import InvalidConfiguration


class TestParser(unittest.TestCase):

    def setUp(self):
        self.parser = cli.setup_parser()

    def test_defaults(self):
        args = self.parser.parse_args([])
        self.assertIsNone(args.path)
        self.assertFalse(args.verbose)
        self.assertFalse(args.concise)
        self.assertIsNone(args.threshold)
        self.assertFalse(args.csv)

    def test_short_flags(self):
        args = self.parser.parse_args(["-v", "-t", "20", "some/repo"])
        self.assertTrue(args.verbose)
        self.assertEqual(args.threshold, 20)
        self.assertEqual(args.path, "some/repo")

    def test_threshold_must_be_positive(self):
        with mock.patch("sys.stderr"):
            with self.assertRaises(SystemExit):
                self.parser.parse_args(["-t", "0"])
            with self.assertRaises(SystemExit):
                self.parser.parse_args(["-t", "ten"])

    def test_positive_int(self):
        self.assertEqual(cli.positive_int("3"), 3)
        with self.assertRaises(argparse.ArgumentTypeError):
            cli.positive_int("-1")


class TestBuildContext(unittest.TestCase):

    def setUp(self):
        self.parser = cli.setup_parser()
        self.global_config = GlobalConfig()

    def _build(self, argv, project_config=None):
        args = self.parser.parse_args(argv)
        return cli.build_context(
            args, self.global_config, "/repo", "/data/repo", project_config or {}
        )

    def test_global_defaults(self):
        context = self._build([])
        self.assertEqual(context.threshold, self.global_config.DEFAULT_THRESHOLD)
        self.assertEqual(context.csv_out, "./commits.csv")
        self.assertFalse(context.verbose)
        self.assertFalse(context.concise)
        self.assertIsNone(context.log_file)

    def test_project_config_overrides_global(self):
        project_config = {
            "default_threshold": 30,
            "default_mode": "concise",
            "default_csv_out": "exports/",
        }
        context = self._build([], project_config)
        self.assertEqual(context.threshold, 30)
        self.assertTrue(context.concise)
        self.assertFalse(context.verbose)
        self.assertEqual(context.csv_out, "exports/")

    def test_cli_overrides_project_config(self):
        project_config = {"default_threshold": 30, "default_mode": "concise"}
        context = self._build(["-t", "5", "-v", "--out", "x.csv"], project_config)
        self.assertEqual(context.threshold, 5)
        self.assertTrue(context.verbose)
        self.assertFalse(context.concise)
        self.assertEqual(context.csv_out, "x.csv")

    def test_project_threshold_must_be_positive(self):
        for value in (-5, 0):
            with self.subTest(value=value):
                with self.assertRaises(InvalidConfiguration) as ctx:
                    self._build([], {"default_threshold": value})
                self.assertIn("config.json default_threshold", str(ctx.exception))

    def test_project_threshold_must_be_numeric(self):
        for value in ("ten", True, ""):
            with self.subTest(value=value):
                with self.assertRaises(InvalidConfiguration):
                    self._build([], {"default_threshold": value})

    def test_numeric_string_threshold_is_accepted(self):
        context = self._build([], {"default_threshold": " 15 "})
        self.assertEqual(context.threshold, 15)

    def test_cli_threshold_skips_invalid_project_threshold(self):
        context = self._build(["-t", "5"], {"default_threshold": "ten"})
        self.assertEqual(context.threshold, 5)

    def test_invalid_global_threshold_names_env_var(self):
        self.global_config.DEFAULT_THRESHOLD = 0
        with self.assertRaises(InvalidConfiguration) as ctx:
            self._build([])
        self.assertIn("COMMITSCAN_THRESHOLD", str(ctx.exception))

    def test_unknown_default_mode(self):
        with self.assertRaises(InvalidConfiguration) as ctx:
            self._build([], {"default_mode": "loud"})
        self.assertIn("loud", str(ctx.exception))

    def test_display_flag_skips_project_mode(self):
        context = self._build(["-c"], {"default_mode": "loud"})
        self.assertTrue(context.concise)


class TestRunCli(unittest.TestCase):

    @mock.patch("cli.ReportOrchestrator")
    def test_verbose_and_concise_conflict(self, mock_orchestrator):
        with self.assertRaises(SystemExit) as ctx:
            cli.run_cli(["-v", "-c"])
        self.assertEqual(ctx.exception.code, 1)
        mock_orchestrator.assert_not_called()

    @mock.patch("cli.ReportOrchestrator")
    def test_project_and_path_conflict(self, mock_orchestrator):
        with self.assertRaises(SystemExit) as ctx:
            cli.run_cli(["-p", "demo", "."])
        self.assertEqual(ctx.exception.code, 1)
        mock_orchestrator.assert_not_called()

    @mock.patch("cli.config_manager.get_path_from_alias", return_value=None)
    @mock.patch("cli.ReportOrchestrator")
    def test_unknown_alias(self, mock_orchestrator, _mock_alias):
        with self.assertRaises(SystemExit) as ctx:
            cli.run_cli(["-p", "missing-alias"])
        self.assertEqual(ctx.exception.code, 1)
        mock_orchestrator.assert_not_called()

    @mock.patch("cli.ReportOrchestrator")
    def test_runs_orchestrator_with_context(self, mock_orchestrator):
        with tempfile.TemporaryDirectory() as tmp:
            cli.run_cli([tmp, "-t", "15", "--log-file", "saved.log"])
        context = mock_orchestrator.call_args[0][0]
        self.assertEqual(context.repo_path, os.path.abspath(tmp))
        self.assertEqual(context.threshold, 15)
        self.assertEqual(context.log_file, "saved.log")
        mock_orchestrator.return_value.run.assert_called_once_with()

    @mock.patch("cli.ReportOrchestrator")
    def test_scan_error_exits_non_zero(self, mock_orchestrator):
        from errors import InsufficientHistory

        mock_orchestrator.return_value.run.side_effect = InsufficientHistory(1)
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(SystemExit) as ctx:
                cli.run_cli([tmp])
        self.assertEqual(ctx.exception.code, 1)

    @mock.patch("cli.config_manager.load_project_config", return_value={"default_threshold": "ten"})
    @mock.patch("cli.ReportOrchestrator")
    def test_invalid_project_config_exits_non_zero(self, mock_orchestrator, _mock_config):
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(SystemExit) as ctx:
                cli.run_cli([tmp])
        self.assertEqual(ctx.exception.code, 1)
        mock_orchestrator.assert_not_called()


if __name__ == "__main__":
    unittest.main()
