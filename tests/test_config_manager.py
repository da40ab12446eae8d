"""
Unit tests for ConfigManager class.
"""
import json
import logging
import shutil
import tempfile
import unittest
from pathlib import Path

from trivia_quiz.config_manager import ConfigManager


class TestConfigManager(unittest.TestCase):
    """Test cases for ConfigManager functionality."""

    def setUp(self):
        """Set up test fixtures before each test method."""
        self.config_manager = ConfigManager()
        self.temp_dir = tempfile.mkdtemp()

        # Suppress logging during tests
        logging.disable(logging.CRITICAL)

    def tearDown(self):
        """Clean up after each test method."""
        logging.disable(logging.NOTSET)
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_initialization_with_defaults(self):
        """Test that ConfigManager initializes with correct default values."""
        self.assertEqual(self.config_manager.get_host(), "127.0.0.1")
        self.assertEqual(self.config_manager.get_port(), 8080)
        self.assertEqual(self.config_manager.get_database(), "./quizzes.json")
        self.assertTrue(self.config_manager.get_seed_samples())
        self.assertTrue(self.config_manager.get_color())
        self.assertEqual(self.config_manager.get_width(), 80)
        self.assertEqual(self.config_manager.get_log_level(), "INFO")

    def test_set_port_valid_values(self):
        for port in (0, 1, 8080, 65535):
            with self.subTest(port=port):
                result = self.config_manager.set_port(port)
                self.assertTrue(result['success'])
                self.assertEqual(self.config_manager.get_port(), port)

    def test_set_port_accepts_numeric_string(self):
        result = self.config_manager.set_port(" 9000 ")

        self.assertTrue(result['success'])
        self.assertEqual(self.config_manager.get_port(), 9000)

    def test_set_port_invalid_values(self):
        for port in (-1, 65536, "abc", 12.5, None, True):
            with self.subTest(port=port):
                result = self.config_manager.set_port(port)
                self.assertFalse(result['success'])
                self.assertIn('error', result)
                self.assertTrue(result['user_message'].startswith("❌"))
        self.assertEqual(self.config_manager.get_port(), ConfigManager.DEFAULT_PORT)

    def test_set_host(self):
        self.assertTrue(self.config_manager.set_host("0.0.0.0")['success'])
        self.assertEqual(self.config_manager.get_host(), "0.0.0.0")

        self.assertFalse(self.config_manager.set_host("   ")['success'])
        self.assertFalse(self.config_manager.set_host(None)['success'])
        self.assertEqual(self.config_manager.get_host(), "0.0.0.0")

    def test_set_database_resolves_path(self):
        path = str(Path(self.temp_dir) / "quizzes.json")

        result = self.config_manager.set_database(path)

        self.assertTrue(result['success'])
        self.assertEqual(self.config_manager.get_database(), str(Path(path).resolve()))

    def test_set_database_invalid_values(self):
        for path in ("", "   ", 123, "/etc/quizzes.json"):
            with self.subTest(path=path):
                self.assertFalse(self.config_manager.set_database(path)['success'])
        self.assertEqual(self.config_manager.get_database(), ConfigManager.DEFAULT_DATABASE)

    def test_set_width_limits(self):
        self.assertTrue(self.config_manager.set_width(40)['success'])
        self.assertTrue(self.config_manager.set_width(200)['success'])
        self.assertFalse(self.config_manager.set_width(39)['success'])
        self.assertFalse(self.config_manager.set_width(201)['success'])
        self.assertFalse(self.config_manager.set_width("80")['success'])
        self.assertEqual(self.config_manager.get_width(), 200)

    def test_set_log_level(self):
        self.assertTrue(self.config_manager.set_log_level("debug")['success'])
        self.assertEqual(self.config_manager.get_log_level(), "DEBUG")
        self.assertFalse(self.config_manager.set_log_level("LOUD")['success'])
        self.assertEqual(self.config_manager.get_log_level(), "DEBUG")

    def test_boolean_settings_reject_other_types(self):
        self.assertFalse(self.config_manager.set_color("yes")['success'])
        self.assertFalse(self.config_manager.set_seed_samples(1)['success'])
        self.assertTrue(self.config_manager.set_color(False)['success'])
        self.assertFalse(self.config_manager.get_color())

    def test_apply_configuration(self):
        database = str(Path(self.temp_dir) / "db.json")
        problems = self.config_manager.apply_configuration({
            "server": {"host": "0.0.0.0", "port": 9999},
            "quiz": {"database": database, "seed_sample_quizzes": False},
            "output": {"color": False, "width": 100},
            "logging": {"level": "WARNING", "log_directory": self.temp_dir},
        })

        self.assertEqual(problems, [])
        self.assertEqual(self.config_manager.get_host(), "0.0.0.0")
        self.assertEqual(self.config_manager.get_port(), 9999)
        self.assertEqual(self.config_manager.get_database(), str(Path(database).resolve()))
        self.assertFalse(self.config_manager.get_seed_samples())
        self.assertFalse(self.config_manager.get_color())
        self.assertEqual(self.config_manager.get_width(), 100)
        self.assertEqual(self.config_manager.get_log_level(), "WARNING")
        self.assertEqual(self.config_manager.get_log_directory(), self.temp_dir)

    def test_apply_configuration_keeps_defaults_for_invalid_values(self):
        problems = self.config_manager.apply_configuration({
            "server": {"port": 70000},
            "output": {"width": 10},
        })

        self.assertEqual(len(problems), 2)
        self.assertEqual(self.config_manager.get_port(), ConfigManager.DEFAULT_PORT)
        self.assertEqual(self.config_manager.get_width(), ConfigManager.DEFAULT_WIDTH)

    def test_apply_configuration_rejects_non_object_sections(self):
        problems = self.config_manager.apply_configuration({
            "server": None,
            "quiz": ["database"],
            "output": {"width": 120},
        })

        self.assertEqual(len(problems), 2)
        self.assertIn("'server'", problems[0])
        self.assertIn("'quiz'", problems[1])
        self.assertEqual(self.config_manager.get_port(), ConfigManager.DEFAULT_PORT)
        self.assertEqual(self.config_manager.get_database(), ConfigManager.DEFAULT_DATABASE)
        self.assertEqual(self.config_manager.get_width(), 120)

    def test_load_file_with_null_section(self):
        config_path = Path(self.temp_dir) / "config.json"
        config_path.write_text(json.dumps({"server": None, "logging": "DEBUG"}), encoding='utf-8')

        problems = self.config_manager.load_file(config_path)

        self.assertEqual(len(problems), 2)
        self.assertEqual(self.config_manager.get_host(), ConfigManager.DEFAULT_HOST)
        self.assertEqual(self.config_manager.get_log_level(), ConfigManager.DEFAULT_LOG_LEVEL)

    def test_apply_environment(self):
        database = str(Path(self.temp_dir) / "env.json")
        problems = self.config_manager.apply_environment({
            "QUIZ_HOST": "localhost",
            "QUIZ_PORT": "7000",
            "QUIZ_DATABASE": database,
        })

        self.assertEqual(problems, [])
        self.assertEqual(self.config_manager.get_host(), "localhost")
        self.assertEqual(self.config_manager.get_port(), 7000)
        self.assertEqual(self.config_manager.get_database(), str(Path(database).resolve()))

    def test_apply_environment_reports_bad_port(self):
        problems = self.config_manager.apply_environment({"QUIZ_PORT": "eighty"})

        self.assertEqual(len(problems), 1)
        self.assertEqual(self.config_manager.get_port(), ConfigManager.DEFAULT_PORT)

    def test_load_file_missing_uses_defaults(self):
        problems = self.config_manager.load_file(Path(self.temp_dir) / "missing.json")

        self.assertEqual(problems, [])
        self.assertEqual(self.config_manager.get_port(), ConfigManager.DEFAULT_PORT)

    def test_load_file_invalid_json(self):
        config_path = Path(self.temp_dir) / "config.json"
        config_path.write_text("{ not json", encoding='utf-8')

        problems = self.config_manager.load_file(config_path)

        self.assertEqual(len(problems), 1)
        self.assertIn("Invalid JSON", problems[0])

    def test_load_file_applies_settings(self):
        config_path = Path(self.temp_dir) / "config.json"
        config_path.write_text(json.dumps({"server": {"port": 4242}}), encoding='utf-8')

        problems = self.config_manager.load_file(config_path)

        self.assertEqual(problems, [])
        self.assertEqual(self.config_manager.get_port(), 4242)

    def test_reset_to_defaults(self):
        self.config_manager.set_port(1234)
        self.config_manager.set_color(False)

        self.config_manager.reset_to_defaults()

        self.assertEqual(self.config_manager.get_port(), ConfigManager.DEFAULT_PORT)
        self.assertTrue(self.config_manager.get_color())

    def test_settings_summary(self):
        summary = self.config_manager.get_settings_summary()

        self.assertIn("Quiz Settings:", summary)
        self.assertIn("127.0.0.1:8080", summary)
        self.assertIn("./quizzes.json", summary)


if __name__ == '__main__':
    unittest.main()
