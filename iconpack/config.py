"""Compiler configuration from environment variables."""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    input_dir: Path = Path("in")
    output_dir: Path = Path("out")
    log_level: str = "info"

    # Icon sources: one SVG per unique icon name
    icon_file_pattern: str = "Icon={name}.svg"

    # Worker pool size for classification and rendering (None = cpu count)
    workers: int | None = None

    # Diagnostic-only class list used for the missing-icon report
    api_dump_url: str = (
        "https://raw.githubusercontent.com/MaximumADHD/Roblox-Client-Tracker/roblox/API-Dump.json"
    )
    api_timeout: float = 10.0

    model_config = {"env_prefix": "ICONPACK_", "env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
