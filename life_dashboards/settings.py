from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


JOURNAL_SECTIONS = ("What I Learnt Today", "Mistakes I Made Today")
DEFAULT_JOURNAL_TITLE = "Untitled"


class Settings(BaseSettings):
    data_dir: Path = Field(Path("./data"), alias="DATA_DIR")
    uploads_dir: Path = Field(Path("./public/uploads"), alias="UPLOADS_DIR")
    database_url_raw: str = Field("", alias="DATABASE_URL")

    default_user_id: int = Field(1, alias="DEFAULT_USER_ID")
    heatmap_window_days: int = Field(365, alias="HEATMAP_WINDOW_DAYS")
    recent_files_limit: int = Field(10, alias="RECENT_FILES_LIMIT")

    log_level: str = Field("INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def database_url(self) -> str:
        if self.database_url_raw.strip():
            return self.database_url_raw.strip()
        return f"sqlite+aiosqlite:///{self.data_dir / 'app.sqlite'}"

    @property
    def files_dir(self) -> Path:
        return self.uploads_dir / "files"

    @property
    def avatars_dir(self) -> Path:
        return self.uploads_dir / "avatars"


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    global _settings
    _settings = None
