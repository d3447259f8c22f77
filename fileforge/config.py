"""Runtime configuration — env-driven.

Centralized settings using pydantic-settings. Reads from a .env file and
FILEFORGE_* environment variables.
"""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class ProdConfig(BaseSettings):
    """Runtime configuration with environment variable overrides.

    Examples
    --------
    Override via environment::

        export FILEFORGE_DEBUG=true
        export FILEFORGE_TEMP_DIR=/var/tmp/fileforge
        export FILEFORGE_DEFAULT_MIN_TLS=1.2
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="FILEFORGE_",
        env_file_encoding="utf-8",
    )

    # Logging; debug forces DEBUG regardless of log_level
    log_level: str = "INFO"
    debug: bool = False

    # Temporary files for downloads and raw payloads (None = system default)
    temp_dir: Path | None = None

    # Upload / download behaviour
    default_min_tls: str = ""  # "" means TLS 1.3
    download_chunk_size: int = 1024 * 1024

    # Assumed when the backend version cannot be determined
    minimum_backend_version: str = "8.0"

    # Root directory of the local directory backend used by the CLI
    local_backend_root: Path = Path(".fileforge/storage")


# Module-level singleton: `from fileforge.config import config`
config = ProdConfig()
