"""
docvault/core/config.py

Centralised configuration loaded from environment variables.
Use a .env file locally; the deployment injects these at runtime.
"""

from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # ── Application ────────────────────────────────────────────────────────────
    app_name: str = "PDF Document Vault API"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # ── Server ─────────────────────────────────────────────────────────────────
    host: str = "0.0.0.0"
    port: int = 3001
    cors_origins: List[str] = ["*"]

    # ── Record store (SQLAlchemy) ──────────────────────────────────────────────
    database_url: str = "sqlite:///./data/documents.sqlite"
    auto_migrate: bool = True   # add original_filename to legacy tables on startup

    # ── Blob store ─────────────────────────────────────────────────────────────
    upload_dir: str = "./uploads"
    max_upload_bytes: int = 10 * 1024 * 1024
    upload_chunk_size: int = 64 * 1024

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


# Single shared instance — import this everywhere.
settings = Settings()
