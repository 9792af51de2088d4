"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    emblemic_env: str = "development"
    emblemic_log_level: str = "info"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Assets
    glyph_dir: str = ""
    font_dirs: list[str] = []

    # Export
    raster_supersample: int = 4
    lossy_quality: int = 90
    alpha_threshold: int = 5
    noise_seed: int = 0

    # History (0 = unbounded)
    history_limit: int = 0

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
