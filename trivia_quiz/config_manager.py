"""
Configuration manager for trivia quiz settings.
"""
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional


class ConfigManager:
    """Manages server, store, output and logging settings."""

    # Default configuration values
    DEFAULT_HOST = "127.0.0.1"
    DEFAULT_PORT = 8080
    DEFAULT_DATABASE = "./quizzes.json"
    DEFAULT_SEED_SAMPLES = True
    DEFAULT_COLOR = True
    DEFAULT_WIDTH = 80
    DEFAULT_LOG_LEVEL = "INFO"
    DEFAULT_LOG_DIRECTORY = "./logs/"

    # Validation limits
    MIN_PORT = 0
    MAX_PORT = 65535
    MIN_WIDTH = 40
    MAX_WIDTH = 200
    LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

    # Environment variables that override the config file
    ENV_HOST = "QUIZ_HOST"
    ENV_PORT = "QUIZ_PORT"
    ENV_DATABASE = "QUIZ_DATABASE"

    def __init__(self):
        """Initialize ConfigManager with default settings."""
        self.logger = logging.getLogger(__name__)
        self.reset_to_defaults()

    def reset_to_defaults(self) -> None:
        """Reset all settings to their default values."""
        self._host = self.DEFAULT_HOST
        self._port = self.DEFAULT_PORT
        self._database = self.DEFAULT_DATABASE
        self._seed_samples = self.DEFAULT_SEED_SAMPLES
        self._color = self.DEFAULT_COLOR
        self._width = self.DEFAULT_WIDTH
        self._log_level = self.DEFAULT_LOG_LEVEL
        self._log_directory = self.DEFAULT_LOG_DIRECTORY
        self.logger.debug("All settings reset to default values")

    def set_host(self, host: str) -> Dict[str, Any]:
        """
        Set the address the server listens on.

        Returns:
            Dictionary with success status, error message, and user-friendly message
        """
        if not isinstance(host, str) or not host.strip():
            error_msg = f"Host must be a non-empty string, got {host!r}"
            self.logger.error(error_msg)
            return {
                'success': False,
                'error': error_msg,
                'user_message': "❌ Invalid host: expected a host name or address"
            }

        self._host = host.strip()
        self.logger.info(f"Host set to {self._host}")
        return {
            'success': True,
            'message': f"Host set to {self._host}",
            'user_message': f"✅ Server will listen on {self._host}"
        }

    def get_host(self) -> str:
        return self._host

    def set_port(self, port: Any) -> Dict[str, Any]:
        """
        Set the TCP port the server listens on.

        Args:
            port: Port number, or a string holding one (from the environment)

        Returns:
            Dictionary with success status, error message, and user-friendly message
        """
        if isinstance(port, str):
            try:
                port = int(port.strip())
            except ValueError:
                error_msg = f"Port must be an integer, got {port!r}"
                self.logger.error(error_msg)
                return {
                    'success': False,
                    'error': error_msg,
                    'user_message': f"❌ Invalid input: Expected a number, got {port!r}"
                }

        if isinstance(port, bool) or not isinstance(port, int):
            error_msg = f"Port must be an integer, got {type(port).__name__}"
            self.logger.error(error_msg)
            return {
                'success': False,
                'error': error_msg,
                'user_message': f"❌ Invalid input: Expected a number, got {type(port).__name__}"
            }

        if port < self.MIN_PORT or port > self.MAX_PORT:
            error_msg = f"Port must be between {self.MIN_PORT} and {self.MAX_PORT}"
            self.logger.error(error_msg)
            return {
                'success': False,
                'error': error_msg,
                'user_message': f"❌ Port out of range: use {self.MIN_PORT}-{self.MAX_PORT}"
            }

        self._port = port
        self.logger.info(f"Port set to {port}")
        return {
            'success': True,
            'message': f"Port set to {port}",
            'user_message': f"✅ Server will listen on port {port}"
        }

    def get_port(self) -> int:
        return self._port

    def set_database(self, path: str) -> Dict[str, Any]:
        """
        Set the path of the JSON quiz database with validation.

        Returns:
            Dictionary with success status, error message, and user-friendly message
        """
        if not isinstance(path, str):
            error_msg = f"Database path must be a string, got {type(path).__name__}"
            self.logger.error(error_msg)
            return {
                'success': False,
                'error': error_msg,
                'user_message': f"❌ Invalid input: Expected a path string, got {type(path).__name__}"
            }

        if not path.strip():
            error_msg = "Database path cannot be empty"
            self.logger.error(error_msg)
            return {
                'success': False,
                'error': error_msg,
                'user_message': "❌ Database path cannot be empty"
            }

        try:
            normalized_path = str(Path(path).resolve())
        except (OSError, ValueError) as e:
            error_msg = f"Invalid database path format: {e}"
            self.logger.error(error_msg)
            return {
                'success': False,
                'error': error_msg,
                'user_message': f"❌ Invalid path format: {path}"
            }

        system_dirs = ['/bin', '/usr', '/etc', '/sys', '/proc', 'C:\\Windows', 'C:\\Program Files']
        if any(normalized_path.startswith(sys_dir) for sys_dir in system_dirs):
            error_msg = f"Cannot use system directory: {normalized_path}"
            self.logger.error(error_msg)
            return {
                'success': False,
                'error': error_msg,
                'user_message': f"❌ Cannot use system directory: {path}"
            }

        self._database = normalized_path
        self.logger.info(f"Database set to {normalized_path}")
        return {
            'success': True,
            'message': f"Database set to {normalized_path}",
            'user_message': f"✅ Quizzes will be stored in {normalized_path}"
        }

    def get_database(self) -> str:
        return self._database

    def set_seed_samples(self, seed: bool) -> Dict[str, Any]:
        if not isinstance(seed, bool):
            error_msg = f"Sample seeding must be a boolean, got {type(seed).__name__}"
            self.logger.error(error_msg)
            return {
                'success': False,
                'error': error_msg,
                'user_message': f"❌ Invalid input: Expected true/false, got {type(seed).__name__}"
            }
        self._seed_samples = seed
        return {
            'success': True,
            'message': f"Sample seeding {'enabled' if seed else 'disabled'}",
            'user_message': "✅ Sample quizzes setting updated"
        }

    def get_seed_samples(self) -> bool:
        return self._seed_samples

    def set_color(self, color: bool) -> Dict[str, Any]:
        if not isinstance(color, bool):
            error_msg = f"Color must be a boolean, got {type(color).__name__}"
            self.logger.error(error_msg)
            return {
                'success': False,
                'error': error_msg,
                'user_message': f"❌ Invalid input: Expected true/false, got {type(color).__name__}"
            }
        self._color = color
        return {
            'success': True,
            'message': f"Color output {'enabled' if color else 'disabled'}",
            'user_message': "✅ Color setting updated"
        }

    def get_color(self) -> bool:
        return self._color

    def set_width(self, width: int) -> Dict[str, Any]:
        """
        Set the rendering width used for banners and wrapped lines.

        Returns:
            Dictionary with success status, error message, and user-friendly message
        """
        if isinstance(width, bool) or not isinstance(width, int):
            error_msg = f"Width must be an integer, got {type(width).__name__}"
            self.logger.error(error_msg)
            return {
                'success': False,
                'error': error_msg,
                'user_message': f"❌ Invalid input: Expected a number, got {type(width).__name__}"
            }

        if width < self.MIN_WIDTH or width > self.MAX_WIDTH:
            error_msg = f"Width must be between {self.MIN_WIDTH} and {self.MAX_WIDTH}"
            self.logger.error(error_msg)
            return {
                'success': False,
                'error': error_msg,
                'user_message': f"❌ Width out of range: use {self.MIN_WIDTH}-{self.MAX_WIDTH}"
            }

        self._width = width
        return {
            'success': True,
            'message': f"Width set to {width}",
            'user_message': f"✅ Output width set to {width}"
        }

    def get_width(self) -> int:
        return self._width

    def set_log_level(self, level: str) -> Dict[str, Any]:
        if not isinstance(level, str) or level.upper() not in self.LOG_LEVELS:
            error_msg = f"Log level must be one of {', '.join(self.LOG_LEVELS)}, got {level!r}"
            self.logger.error(error_msg)
            return {
                'success': False,
                'error': error_msg,
                'user_message': f"❌ Unknown log level: {level}"
            }
        self._log_level = level.upper()
        return {
            'success': True,
            'message': f"Log level set to {self._log_level}",
            'user_message': f"✅ Log level set to {self._log_level}"
        }

    def get_log_level(self) -> str:
        return self._log_level

    def set_log_directory(self, directory: str) -> Dict[str, Any]:
        if not isinstance(directory, str) or not directory.strip():
            error_msg = "Log directory cannot be empty"
            self.logger.error(error_msg)
            return {
                'success': False,
                'error': error_msg,
                'user_message': "❌ Log directory cannot be empty"
            }
        self._log_directory = directory
        return {
            'success': True,
            'message': f"Log directory set to {directory}",
            'user_message': f"✅ Logs will be written to {directory}"
        }

    def get_log_directory(self) -> str:
        return self._log_directory

    def apply_configuration(self, config: Dict[str, Any]) -> List[str]:
        """
        Apply settings from a parsed config file.

        Invalid values are skipped and the defaults kept.

        Args:
            config: Dictionary with optional server, quiz, output and logging sections

        Returns:
            List of user-friendly messages for settings that were rejected
        """
        problems = []
        sections = {}
        for name in ('server', 'quiz', 'output', 'logging'):
            section = config.get(name, {})
            if not isinstance(section, dict):
                self.logger.warning(f"Config section '{name}' is not an object, using defaults")
                problems.append(f"❌ Config section '{name}' must be a JSON object, using defaults")
                section = {}
            sections[name] = section
        server = sections['server']
        quiz = sections['quiz']
        output = sections['output']
        log_config = sections['logging']

        results = []
        if 'host' in server:
            results.append(self.set_host(server['host']))
        if 'port' in server:
            results.append(self.set_port(server['port']))
        if 'database' in quiz:
            results.append(self.set_database(quiz['database']))
        if 'seed_sample_quizzes' in quiz:
            results.append(self.set_seed_samples(quiz['seed_sample_quizzes']))
        if 'color' in output:
            results.append(self.set_color(output['color']))
        if 'width' in output:
            results.append(self.set_width(output['width']))
        if 'level' in log_config:
            results.append(self.set_log_level(log_config['level']))
        if 'log_directory' in log_config:
            results.append(self.set_log_directory(log_config['log_directory']))

        return problems + [result['user_message'] for result in results if not result['success']]

    def apply_environment(self, environ: Optional[Dict[str, str]] = None) -> List[str]:
        """
        Apply QUIZ_HOST, QUIZ_PORT and QUIZ_DATABASE overrides.

        Returns:
            List of user-friendly messages for overrides that were rejected
        """
        environ = os.environ if environ is None else environ
        results = []
        if environ.get(self.ENV_HOST):
            results.append(self.set_host(environ[self.ENV_HOST]))
        if environ.get(self.ENV_PORT):
            results.append(self.set_port(environ[self.ENV_PORT]))
        if environ.get(self.ENV_DATABASE):
            results.append(self.set_database(environ[self.ENV_DATABASE]))
        return [result['user_message'] for result in results if not result['success']]

    def load_file(self, config_path: Path) -> List[str]:
        """
        Load and apply a JSON config file. A missing file keeps the defaults.

        Returns:
            List of user-friendly messages describing problems found
        """
        if not config_path.exists():
            self.logger.info(f"No config file at {config_path}, using defaults")
            return []

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            self.logger.error(f"Invalid JSON in {config_path}: {e}")
            return [f"❌ Invalid JSON in {config_path}: {e}"]
        except OSError as e:
            self.logger.error(f"Error loading {config_path}: {e}")
            return [f"❌ Cannot read {config_path}: {e}"]

        if not isinstance(config, dict):
            return [f"❌ {config_path} must contain a JSON object"]
        return self.apply_configuration(config)

    def get_settings_summary(self) -> str:
        """
        Get a formatted summary of current settings.

        Returns:
            Human-readable string describing current settings
        """
        return (
            f"Quiz Settings:\n"
            f"• Server: {self._host}:{self._port}\n"
            f"• Database: {self._database}\n"
            f"• Sample quizzes: {'yes' if self._seed_samples else 'no'}\n"
            f"• Color: {'on' if self._color else 'off'} (width {self._width})\n"
            f"• Logging: {self._log_level} in {self._log_directory}"
        )
