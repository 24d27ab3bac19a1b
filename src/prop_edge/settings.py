"""Application settings for prop-edge."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from prop_edge.config import MatchingConfig, load_matching_config


class Settings(BaseSettings):
    """Runtime settings for scans and the matching config location."""

    model_config = SettingsConfigDict(
        env_prefix="PROP_EDGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    matching_config_path: str = ""
    scan_batch_size: int = Field(default=3, ge=1)
    scan_batch_delay_s: float = Field(default=0.6, ge=0.0)
    scan_max_attempts: int = Field(default=2, ge=1)
    log_level: str = "INFO"

    def matching_config(self) -> MatchingConfig:
        """Resolve the matching config, falling back to built-in defaults."""
        raw = self.matching_config_path.strip()
        if not raw:
            return load_matching_config(None)
        return load_matching_config(Path(raw))
