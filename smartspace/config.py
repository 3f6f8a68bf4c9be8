"""
Configuration management for smartspace stores.

The ingestion limits are fixed constants. Store-level settings (which
language identifier to use) live in a TOML file in the store directory.
"""

import os
import tomllib
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

import tomli_w


CONFIG_FILENAME = "smartspace.toml"
CONFIG_VERSION = 1
DATABASE_FILENAME = "spaces.db"
STORE_PATH_ENV = "SMARTSPACE_STORE_PATH"

# Ingestion limits
SAMPLE_CAP = 8192
MAX_PDF_PAGES = 3
SUPPORTED_LANGUAGE = "en"
SUPPORTED_LANGUAGE_NAME = "English"

# Attachment storage
ATTACHMENTS_DIRNAME = "Attachments"
PASTED_SUFFIX = "-pasted.txt"
PASTED_DISPLAY_NAME = "Pasted text.txt"

SPACE_NAME_LIMIT = 24

# Display names for the language tags the identifier commonly returns
LANGUAGE_NAMES = {
    "en": "English",
    "es": "Spanish",
    "fr": "French",
    "de": "German",
    "it": "Italian",
    "pt": "Portuguese",
    "nl": "Dutch",
    "ru": "Russian",
    "uk": "Ukrainian",
    "pl": "Polish",
    "ja": "Japanese",
    "ko": "Korean",
    "zh-cn": "Chinese (Simplified)",
    "zh-tw": "Chinese (Traditional)",
}


def language_display_name(code: Optional[str]) -> str:
    """Human-readable language name for a tag, or "Language unknown"."""
    if not code:
        return "Language unknown"
    return LANGUAGE_NAMES.get(code, code)


def get_default_store_path() -> Path:
    """Store root from SMARTSPACE_STORE_PATH, else ~/.smartspace."""
    env_path = os.environ.get(STORE_PATH_ENV)
    if env_path:
        return Path(env_path).expanduser()
    return Path.home() / ".smartspace"


@dataclass
class ProviderConfig:
    """Configuration for a single provider."""
    name: str
    params: dict[str, Any] = field(default_factory=dict)


@dataclass
class StoreConfig:
    """Complete store configuration."""
    path: Path
    version: int = CONFIG_VERSION
    created: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    language: ProviderConfig = field(default_factory=lambda: ProviderConfig("langdetect"))

    @property
    def config_path(self) -> Path:
        """Path to the TOML config file."""
        return self.path / CONFIG_FILENAME

    @property
    def database_path(self) -> Path:
        return self.path / DATABASE_FILENAME


def load_config(store_path: Path) -> StoreConfig:
    """
    Load configuration from a store directory.

    Raises:
        FileNotFoundError: If config doesn't exist
        ValueError: If config is invalid
    """
    config_path = store_path / CONFIG_FILENAME

    if not config_path.exists():
        raise FileNotFoundError(f"Config not found: {config_path}")

    with open(config_path, "rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid config {config_path}: {e}") from e

    version = data.get("store", {}).get("version", 1)
    if version > CONFIG_VERSION:
        raise ValueError(f"Config version {version} is newer than supported ({CONFIG_VERSION})")

    language = data.get("language", {"name": "langdetect"})
    return StoreConfig(
        path=store_path,
        version=version,
        created=data.get("store", {}).get("created", ""),
        language=ProviderConfig(
            name=language.get("name", "langdetect"),
            params={k: v for k, v in language.items() if k != "name"},
        ),
    )


def save_config(config: StoreConfig) -> None:
    """
    Save configuration to the store directory.

    Creates the directory if it doesn't exist.
    """
    config.path.mkdir(parents=True, exist_ok=True)

    language = {"name": config.language.name}
    language.update(config.language.params)
    data = {
        "store": {
            "version": config.version,
            "created": config.created,
        },
        "language": language,
    }

    with open(config.config_path, "wb") as f:
        tomli_w.dump(data, f)


def load_or_create_config(store_path: Path) -> StoreConfig:
    """
    Load existing config or create a new one with defaults.

    This is the main entry point for config management.
    """
    if (store_path / CONFIG_FILENAME).is_file():
        return load_config(store_path)
    config = StoreConfig(path=store_path)
    save_config(config)
    return config
