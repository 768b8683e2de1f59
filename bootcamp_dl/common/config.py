"""Project configuration and paths.

Loads settings from config/settings.yaml and environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

# === Paths ===
PROJECT_ROOT = Path(__file__).parent.parent.parent
CONFIG_DIR = PROJECT_ROOT / "config"

# Load .env from project root
load_dotenv(PROJECT_ROOT / ".env")

SOFTWARE_UPDATE_CATALOG_URL = (
    "https://swscan.apple.com/content/catalogs/others/"
    "index-14-13-12-10.16-10.15-10.14-10.13-10.12-10.11-10.10-10.9"
    "-mountainlion-lion-snowleopard-leopard.merged-1.sucatalog.gz"
)


class NetworkSettings(BaseModel):
    """Settings for catalog, distribution and package fetches."""
    catalog_url: str = SOFTWARE_UPDATE_CATALOG_URL
    request_timeout: int = 60
    chunk_size: int = 64 * 1024
    user_agent: str = "Software%20Update (unknown version) CFNetwork/807.0.1 Darwin/16.0.0 (x86_64)"


class MatchSettings(BaseModel):
    """Settings for picking support-software products out of the catalog."""
    support_marker: str = "BootCamp"
    distribution_locale: str = "English"


class ExtractSettings(BaseModel):
    """File layout used by the download and extraction stages."""
    work_dir_prefix: str = "BC-"
    package_filename: str = "BootCampSupport.pkg"
    expanded_dirname: str = "pkg"
    payload_name: str = "Payload"
    artifact_pattern: str = r".*\.dmg$"
    output_filename: str = "BootcampSupportSoftware.dmg"


class Settings(BaseModel):
    """Top-level application settings."""
    network: NetworkSettings = Field(default_factory=NetworkSettings)
    match: MatchSettings = Field(default_factory=MatchSettings)
    extract: ExtractSettings = Field(default_factory=ExtractSettings)
    default_model: str = "iMac12,2"

    @classmethod
    def load(cls, path: str | Path | None = None) -> Settings:
        """Load settings from YAML (config/settings.yaml by default), then env overrides."""
        settings_path = Path(path) if path else CONFIG_DIR / "settings.yaml"
        data: dict = {}
        if settings_path.exists():
            with open(settings_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        loaded = cls(**data)
        loaded.apply_env_overrides()
        return loaded

    def apply_env_overrides(self) -> None:
        """Load overrides from environment."""
        if url := os.getenv("BOOTCAMP_CATALOG_URL"):
            self.network.catalog_url = url
        if timeout := os.getenv("BOOTCAMP_REQUEST_TIMEOUT"):
            self.network.request_timeout = int(timeout)
        if chunk := os.getenv("BOOTCAMP_CHUNK_SIZE"):
            self.network.chunk_size = int(chunk)
        if model := os.getenv("BOOTCAMP_DEFAULT_MODEL"):
            self.default_model = model


# Singleton settings instance
settings = Settings.load()
