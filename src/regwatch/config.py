from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
import yaml

from regwatch.exceptions import ConfigError
from regwatch.sync.provider import build_feed_url

class AppSettings(BaseSettings):
    name: str = "Regwatch"
    version: str = "1.0.0"

class FeedSettings(BaseSettings):
    """
    Locations of the two gviz feeds (milestones, config).
    Explicit URLs win over the sheet_id + sheet name pair.
    """
    sheet_id: str = "18_cfhfJah0l0bOu4urB3Oj52Bx6HBKRZF-_8765OgoM"
    milestones_sheet: str = "milestones"
    config_sheet: str = "config"
    url_template: str = "https://docs.google.com/spreadsheets/d/{sheet_id}/gviz/tq"
    milestones_url: Optional[str] = None
    config_url: Optional[str] = None
    request_timeout_seconds: float = 15.0

    def locator_for(self, sheet_name: str, override: Optional[str] = None) -> str:
        if override:
            return override
        if not self.sheet_id:
            raise ConfigError(f"No sheet_id configured for feed '{sheet_name}'.")
        return build_feed_url(self.sheet_id, sheet_name, template=self.url_template)

    @property
    def milestones_locator(self) -> str:
        return self.locator_for(self.milestones_sheet, self.milestones_url)

    @property
    def config_locator(self) -> str:
        return self.locator_for(self.config_sheet, self.config_url)

class LoggingSettings(BaseSettings):
    log_requests: bool = True
    level: str = "INFO"

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_nested_delimiter="__", env_file=".env", extra="ignore")
    app: AppSettings = AppSettings()
    feeds: FeedSettings = FeedSettings()
    logging: LoggingSettings = LoggingSettings()

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        # Load from default path if exists
        default_path = Path("config/settings.yaml")
        path = config_path or (default_path if default_path.exists() else None)

        if not path:
            return cls()

        with open(path, "r") as f:
            config_data = yaml.safe_load(f) or {}

        return cls(**config_data)

settings = Settings.load()
