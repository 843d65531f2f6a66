"""
Admin Client Configuration Management
"""

import os
import json
from pathlib import Path
from dataclasses import dataclass, field, asdict
from typing import Optional, Dict, Any

from dotenv import load_dotenv


DEFAULT_API_BASE_URL = "https://academixstore-backend.onrender.com/api/"


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class AdminConfig:
    """Configuration for the AcademixStore admin client"""

    # API settings
    api_base_url: str = DEFAULT_API_BASE_URL
    timeout: float = 30.0  # seconds, applied to connect/read/write

    # Paging
    page_size: int = 20

    # Upload limits
    max_pdf_size_bytes: int = 52428800  # 50MB
    max_image_size_bytes: int = 5242880  # 5MB

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None
    json_logs: bool = False

    # Paths
    config_dir: str = field(default_factory=lambda: str(Path.home() / ".academix"))
    credentials_file: str = "credentials.json"

    def __post_init__(self):
        """Resolve relative paths against the config directory"""
        if not os.path.isabs(self.credentials_file):
            self.credentials_file = str(Path(self.config_dir) / self.credentials_file)

    @property
    def config_path(self) -> Path:
        return Path(self.config_dir) / "config.json"

    def ensure_dirs(self) -> None:
        """Create the config directory if it does not exist"""
        Path(self.config_dir).mkdir(parents=True, exist_ok=True)

    def load_from_file(self, config_path: str) -> None:
        """Load configuration from JSON file"""
        path = Path(config_path)
        if path.exists():
            with open(path) as f:
                data = json.load(f)
                for key, value in data.items():
                    if hasattr(self, key):
                        setattr(self, key, value)

    def save_to_file(self, config_path: Optional[str] = None) -> None:
        """Save configuration to JSON file"""
        self.ensure_dirs()
        path = Path(config_path or self.config_path)
        with open(path, 'w') as f:
            json.dump(asdict(self), f, indent=2)

    @classmethod
    def load_default(cls, env_file: Optional[str] = None, config_file: Optional[str] = None) -> "AdminConfig":
        """
        Build the effective configuration.

        Precedence (lowest first): defaults, config.json in the config
        directory, `config_file` when given, environment variables (a .env
        file is loaded first).
        """
        load_dotenv(env_file)

        config_dir = os.environ.get("ACADEMIX_CONFIG_DIR")
        config = cls(config_dir=config_dir) if config_dir else cls()
        if config.config_path.exists():
            config.load_from_file(str(config.config_path))
        if config_file:
            config.load_from_file(config_file)

        config._load_from_env()
        return config

    def _load_from_env(self) -> None:
        """Load configuration from environment variables"""
        env_mappings = {
            "ACADEMIX_API_URL": "api_base_url",
            "ACADEMIX_TIMEOUT": ("timeout", float),
            "ACADEMIX_PAGE_SIZE": ("page_size", int),
            "ACADEMIX_LOG_LEVEL": "log_level",
            "ACADEMIX_LOG_FILE": "log_file",
            "ACADEMIX_JSON_LOGS": ("json_logs", _parse_bool),
            "ACADEMIX_CREDENTIALS_FILE": "credentials_file",
        }

        for env_var, mapping in env_mappings.items():
            value = os.environ.get(env_var)
            if value:
                if isinstance(mapping, tuple):
                    attr, converter = mapping
                    setattr(self, attr, converter(value))
                else:
                    setattr(self, mapping, value)

        self.__post_init__()

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary"""
        return asdict(self)
