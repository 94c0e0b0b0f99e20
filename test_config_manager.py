import os
import json
import tempfile
import unittest
from unittest import mock

import config_manager


class TestConfigManager(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.data_root = self._tmp.name
        self.repo_path = os.path.join(self._tmp.name, "repos", "sample-repo")
        os.makedirs(self.repo_path)

    def tearDown(self):
        self._tmp.cleanup()

    def test_aliases_round_trip(self):
        config_manager.save_project_aliases(self.data_root, {"demo": self.repo_path})
        self.assertEqual(
            config_manager.get_path_from_alias(self.data_root, "demo"), self.repo_path
        )
        self.assertIsNone(config_manager.get_path_from_alias(self.data_root, "other"))

    def test_missing_files_give_empty_config(self):
        self.assertEqual(config_manager.load_project_aliases(self.data_root), {})
        self.assertEqual(config_manager.load_project_config(self.data_root), {})

    def test_corrupt_config_is_ignored(self):
        with open(os.path.join(self.data_root, config_manager.CONFIG_JSON_FILE), "w") as f:
            f.write("{not json")
        self.assertEqual(config_manager.load_project_config(self.data_root), {})

    def test_project_data_path_uses_repo_name(self):
        self.assertEqual(
            config_manager.get_project_data_path(self.data_root, self.repo_path),
            os.path.join(self.data_root, "sample-repo"),
        )

    def test_interactive_wizard_saves_alias_and_defaults(self):
        answers = iter(["demo", "25", "verbose", "exports/"])
        with mock.patch("builtins.input", side_effect=lambda prompt: next(answers)), \
                mock.patch("builtins.print"):
            config_manager.run_interactive_config_wizard(self.data_root, self.repo_path)

        aliases = config_manager.load_project_aliases(self.data_root)
        self.assertEqual(aliases, {"demo": self.repo_path})

        project_data_path = config_manager.get_project_data_path(self.data_root, self.repo_path)
        with open(os.path.join(project_data_path, config_manager.CONFIG_JSON_FILE)) as f:
            saved = json.load(f)
        self.assertEqual(
            saved,
            {"default_threshold": 25, "default_mode": "verbose", "default_csv_out": "exports/"},
        )

    def test_wizard_keeps_defaults_on_empty_input(self):
        with mock.patch("builtins.input", return_value=""), mock.patch("builtins.print"):
            config_manager.run_interactive_config_wizard(self.data_root, self.repo_path)

        project_data_path = config_manager.get_project_data_path(self.data_root, self.repo_path)
        saved = config_manager.load_project_config(project_data_path)
        self.assertEqual(saved["default_threshold"], 10)
        self.assertEqual(saved["default_mode"], "normal")
        self.assertEqual(saved["default_csv_out"], "./commits.csv")
        self.assertEqual(
            config_manager.load_project_aliases(self.data_root), {"sample-repo": self.repo_path}
        )

    def test_wizard_reprompts_until_threshold_is_positive(self):
        answers = iter(["demo", "0", "ten", "-4", "12", "concise", ""])
        with mock.patch("builtins.input", side_effect=lambda prompt: next(answers)), \
                mock.patch("builtins.print") as mock_print:
            config_manager.run_interactive_config_wizard(self.data_root, self.repo_path)

        project_data_path = config_manager.get_project_data_path(self.data_root, self.repo_path)
        saved = config_manager.load_project_config(project_data_path)
        self.assertEqual(saved["default_threshold"], 12)
        self.assertEqual(saved["default_mode"], "concise")
        retries = [c for c in mock_print.call_args_list if "正整数" in str(c)]
        self.assertEqual(len(retries), 3)


if __name__ == "__main__":
    unittest.main()
