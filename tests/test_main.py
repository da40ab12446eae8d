"""
Unit tests for the entry point: config layering and startup.
"""
import io
import json
import os
import shutil
import tempfile
import unittest
from pathlib import Path
from unittest.mock import AsyncMock, patch

from trivia_quiz import main as entry
from trivia_quiz.config_manager import ConfigManager

QUIZ_ENV_CLEARED = {
    ConfigManager.ENV_HOST: "",
    ConfigManager.ENV_PORT: "",
    ConfigManager.ENV_DATABASE: "",
}


class TestLoadConfig(unittest.TestCase):
    """Test cases for load_config."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.config_path = Path(self.temp_dir) / "config.json"

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _load(self, *argv):
        args = entry.build_parser().parse_args(["--config", str(self.config_path), *argv])
        stderr = io.StringIO()
        with patch.dict(os.environ, QUIZ_ENV_CLEARED), patch('sys.stderr', stderr):
            config_manager = entry.load_config(args)
        return config_manager, stderr.getvalue()

    def test_command_line_overrides_file(self):
        self.config_path.write_text(json.dumps({"server": {"port": 4000}}), encoding='utf-8')

        config_manager, errors = self._load("--port", "5000", "--no-color")

        self.assertEqual(errors, "")
        self.assertEqual(config_manager.get_port(), 5000)
        self.assertFalse(config_manager.get_color())

    def test_malformed_section_is_reported_not_raised(self):
        self.config_path.write_text(json.dumps({"server": None, "output": []}), encoding='utf-8')

        config_manager, errors = self._load()

        self.assertIn("'server'", errors)
        self.assertIn("'output'", errors)
        self.assertEqual(config_manager.get_port(), ConfigManager.DEFAULT_PORT)
        self.assertEqual(config_manager.get_width(), ConfigManager.DEFAULT_WIDTH)


class TestRunWithConfig(unittest.IsolatedAsyncioTestCase):
    """Test cases for run_with_config."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.config_manager = ConfigManager()
        self.config_manager.set_database(str(Path(self.temp_dir) / "quizzes.json"))

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    async def test_logs_settings_and_runs_local_session(self):
        with patch.object(entry, 'run_local_session', new=AsyncMock()) as local_session, \
                self.assertLogs('trivia_quiz.main', level='INFO') as logs:
            await entry.run_with_config(self.config_manager, serve=False)

        local_session.assert_awaited_once()
        self.assertTrue(any("Quiz Settings:" in line for line in logs.output))
        self.assertTrue(any(self.config_manager.get_database() in line for line in logs.output))

    async def test_seeds_empty_store(self):
        with patch.object(entry, 'run_local_session', new=AsyncMock()) as local_session:
            await entry.run_with_config(self.config_manager, serve=False)

        store = local_session.await_args.args[0]
        self.assertEqual(await store.count(), len(store.SAMPLE_QUIZZES))


if __name__ == '__main__':
    unittest.main()
