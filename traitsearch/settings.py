"""
traitsearch/settings.py

Central configuration for the Trait Search API.
- Points at the runtime YAML (endpoints, weights, limits) and the bundled data directory.
- Uses pydantic-settings so values can be overridden via TRAITS_* environment variables or a `.env` file.
- Import `from traitsearch.settings import settings` anywhere in the project to access shared config.
"""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

ROOT = Path(__file__).resolve().parents[1]   # project root


class Settings(BaseSettings):
    """
    Process-level settings. Search behaviour itself lives in the runtime YAML so
    endpoints can be re-pointed without code edits.
    """

    model_config = SettingsConfigDict(env_prefix="TRAITS_", env_file=".env", extra="ignore")

    # ---------- Files ----------
    runtime_config: Path = ROOT / "configs" / "runtime.yaml"   # Endpoint + search config
    data_dir: Path = ROOT / "data"                             # Root for dataset paths in the runtime config

    # ---------- Logging ----------
    log_level: str = "INFO"


# Singleton settings instance used across the app
settings = Settings()
