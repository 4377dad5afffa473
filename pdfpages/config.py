"""Configuration management for the PDF page selection service."""

import os
from dataclasses import dataclass, field
from typing import Optional


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() in ("1", "true", "yes", "on")


@dataclass
class SelectionConfig:
    """Configuration for page selection and text extraction."""
    max_file_size_mb: int = field(
        default_factory=lambda: int(os.environ.get("MAX_FILE_SIZE_MB", "100"))
    )
    grep_max_results: int = field(
        default_factory=lambda: int(os.environ.get("GREP_MAX_RESULTS", "100"))
    )
    text_cache_enabled: bool = field(
        default_factory=lambda: _env_flag("TEXT_CACHE_ENABLED", "true")
    )


@dataclass
class ServerConfig:
    """Configuration for HTTP server."""
    host: str = field(
        default_factory=lambda: os.environ.get("HTTP_HOST", "0.0.0.0")
    )
    port: int = field(
        default_factory=lambda: int(os.environ.get("HTTP_PORT", "8089"))
    )
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO").upper()
    )


@dataclass
class Config:
    """Main configuration container."""
    selection: SelectionConfig = field(default_factory=SelectionConfig)
    server: ServerConfig = field(default_factory=ServerConfig)


# Global configuration instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create the global configuration instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def reload_config() -> Config:
    """Force reload of configuration from environment."""
    global _config
    _config = Config()
    return _config
