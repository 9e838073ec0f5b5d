"""
Configuration management for the quotes crawler.

Every setting has a built-in default, so a configuration file is optional.
"""

import yaml
import logging
from pathlib import Path
from typing import Any, Dict, Optional
from dataclasses import dataclass, field, fields


DEFAULT_INDEX_URL = "http://www.abc-citations.com/themes/"
DEFAULT_OUTPUT_FILE = "data.json"


@dataclass
class CrawlerConfig:
    """Configuration for crawler behavior."""
    index_url: str = DEFAULT_INDEX_URL
    retry_attempts: int = 5
    retry_delay: float = 1.0
    request_timeout: float = 30.0
    max_concurrent_requests: Optional[int] = None
    user_agent: Optional[str] = None


@dataclass
class OutputConfig:
    """Configuration for the JSON output."""
    file: str = DEFAULT_OUTPUT_FILE
    indent: int = 4
    print_stdout: bool = True


@dataclass
class LoggingConfig:
    """Configuration for logging."""
    level: str = "INFO"
    file: Optional[str] = None
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    json: bool = False


@dataclass
class Config:
    """Main configuration class."""
    crawler: CrawlerConfig = field(default_factory=CrawlerConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _build_section(section_cls, data: Optional[Dict[str, Any]]):
    """Instantiate a config section, rejecting unknown keys."""
    data = data or {}
    known = {f.name for f in fields(section_cls)}
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"Unknown {section_cls.__name__} keys: {', '.join(sorted(unknown))}")
    return section_cls(**data)


class ConfigManager:
    """Manages configuration loading and validation."""

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = Path(config_path) if config_path else None
        self._config: Optional[Config] = None

    def load_config(self) -> Config:
        """Load configuration from the YAML file, or defaults when there is none."""
        config_data: Dict[str, Any] = {}

        if self.config_path is not None:
            if not self.config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

            try:
                with open(self.config_path, 'r') as file:
                    config_data = yaml.safe_load(file) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {self.config_path}: {e}") from e

            if not isinstance(config_data, dict):
                raise ValueError(f"Configuration file must contain a mapping: {self.config_path}")

        self._config = Config(
            crawler=_build_section(CrawlerConfig, config_data.get('crawler')),
            output=_build_section(OutputConfig, config_data.get('output')),
            logging=_build_section(LoggingConfig, config_data.get('logging'))
        )

        self._validate_config()
        return self._config

    def _validate_config(self):
        """Validate configuration values."""
        if not self._config:
            raise ValueError("Configuration not loaded")

        crawler = self._config.crawler

        if not crawler.index_url:
            raise ValueError("index_url must be provided")

        if crawler.retry_attempts < 0:
            raise ValueError("retry_attempts must be non-negative")

        if crawler.retry_delay < 0:
            raise ValueError("retry_delay must be non-negative")

        if crawler.request_timeout <= 0:
            raise ValueError("request_timeout must be positive")

        if crawler.max_concurrent_requests is not None and crawler.max_concurrent_requests < 1:
            raise ValueError("max_concurrent_requests must be at least 1")

        if not self._config.output.file:
            raise ValueError("output file must be provided")

        if not isinstance(getattr(logging, self._config.logging.level.upper(), None), int):
            raise ValueError(f"Unknown log level: {self._config.logging.level}")

        logging.debug("Configuration validation passed")

    @property
    def config(self) -> Config:
        """Get the loaded configuration."""
        if not self._config:
            raise ValueError("Configuration not loaded. Call load_config() first.")
        return self._config


def load_config(config_path: Optional[str] = None) -> Config:
    """Load configuration from file, or the built-in defaults."""
    return ConfigManager(config_path).load_config()
