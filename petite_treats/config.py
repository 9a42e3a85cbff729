"""
Runtime configuration for the storefront API.

Values are read from the environment with the ``PETITE_TREATS_`` prefix,
e.g. ``PETITE_TREATS_DATABASE_URL=postgresql://...``. Tests build a
``Settings`` instance explicitly and hand it to ``create_app()``.
"""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Packaged seed data and the plain-text lists served by the API
DATA_DIR = Path(__file__).resolve().parent / "data"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="PETITE_TREATS_")

    database_url: str = "sqlite:///./petite_treats.db"
    data_dir: Path = DATA_DIR
    featured_file: str = "featured.txt"
    box_decorations_file: str = "box-decorations.txt"
    seed_file: str = "seed.json"
    seed_on_startup: bool = True
    debug: bool = False

    @property
    def featured_path(self) -> Path:
        return self.data_dir / self.featured_file

    @property
    def box_decorations_path(self) -> Path:
        return self.data_dir / self.box_decorations_file

    @property
    def seed_path(self) -> Path:
        return self.data_dir / self.seed_file
