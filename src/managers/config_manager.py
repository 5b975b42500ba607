"""
Config Manager

Loads config.yaml, applies environment overrides and validates the result
into an AppConfig.
"""

import os
import yaml
from pathlib import Path
from typing import Any, Dict, Mapping, Optional
from pydantic import ValidationError

from models.config import AppConfig
from models.enums import LogLevel
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.CONFIG)


# Environment variable → (section, key)
ENV_OVERRIDES = {
    "HOST": ("server", "host"),
    "PORT": ("server", "port"),
    "FRAMES_ROOT": ("animations", "root"),
    "LOG_LEVEL": ("logging", "level"),
}


class ConfigManager:
    """
    Main configuration manager

    Example:
        config_manager = ConfigManager()
        config = config_manager.load()

        config.server.port            # 3000
        config_manager.frames_root    # absolute Path to animation directories
    """

    def __init__(
        self,
        config_path: str = "config/config.yaml",
        env: Optional[Mapping[str, str]] = None,
        base_dir: Optional[Path] = None,
    ):
        """
        Initialize ConfigManager

        Args:
            config_path: Path to config.yaml (relative to src/ unless absolute)
            env: Environment mapping for overrides (defaults to os.environ)
            base_dir: Directory a relative animations.root resolves against
                      (defaults to the process working directory)
        """
        self.config_path = Path(config_path)
        self.env = os.environ if env is None else env
        self.base_dir = base_dir
        self.data: Dict[str, Any] = {}
        self.config: AppConfig = AppConfig()

    def _resolve_config_path(self) -> Path:
        if self.config_path.is_absolute():
            return self.config_path
        src_dir = Path(__file__).parent.parent
        return src_dir / self.config_path

    def load(self) -> AppConfig:
        """
        Load YAML configuration

        Process:
        1. Load config.yaml (missing or unreadable file → built-in defaults)
        2. Apply environment overrides
        3. Validate into AppConfig (invalid values → built-in defaults)

        Returns:
            Validated AppConfig
        """
        full_path = self._resolve_config_path()
        try:
            with open(full_path, "r", encoding="utf-8") as f:
                self.data = yaml.safe_load(f) or {}
            if not isinstance(self.data, dict):
                raise ValueError("top-level YAML document must be a mapping")
            log.info(f"Loaded {full_path.name}", keys=str(list(self.data.keys())))
        except FileNotFoundError:
            log.warn("Config file not found, using defaults", path=str(full_path))
            self.data = {}
        except Exception as ex:
            log.error("Failed to load config.yaml", error=str(ex), error_type=type(ex).__name__)
            log.warn("Falling back to built-in defaults")
            self.data = {}

        self._apply_env_overrides()

        try:
            self.config = AppConfig.model_validate(self.data)
        except ValidationError as ex:
            log.error("Invalid configuration values", errors=ex.error_count())
            log.warn("Falling back to built-in defaults")
            self.config = AppConfig()

        log.info(
            "Configuration ready",
            host=self.config.server.host,
            port=self.config.server.port,
            frames_root=str(self.frames_root),
        )
        return self.config

    def _apply_env_overrides(self) -> None:
        for var, (section, key) in ENV_OVERRIDES.items():
            value = self.env.get(var)
            if value is None or value == "":
                continue
            section_data = self.data.get(section)
            if not isinstance(section_data, dict):
                section_data = {}
                self.data[section] = section_data
            section_data[key] = value
            log.debug(f"Environment override {var}", section=section, key=key)

    # ===== Derived values =====

    @property
    def frames_root(self) -> Path:
        """Absolute animation root directory."""
        root = Path(self.config.animations.root)
        if root.is_absolute():
            return root
        base = self.base_dir if self.base_dir is not None else Path.cwd()
        return (base / root).resolve()

    @property
    def log_level(self) -> LogLevel:
        """Configured log level (INFO when the name is unknown)."""
        try:
            return LogLevel[self.config.logging.level.upper()]
        except KeyError:
            log.warn(f"Unknown log level '{self.config.logging.level}', using INFO")
            return LogLevel.INFO
