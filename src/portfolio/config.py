from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Portfolio"
    app_env: str = "development"
    app_host: str = "0.0.0.0"
    app_port: int = 5000
    log_level: str = "INFO"

    database_url: str = "sqlite:///./data/portfolio.db"
    sqlite_busy_timeout_sec: int = 15
    data_dir: Path = Path("./data")
    upload_dir: Path = Path("./data/uploads")

    default_owner_id: str = "employer"
    default_owner_email: str = "employer@tylerbustard.ca"
    default_owner_first_name: str = "Admin"
    default_owner_last_name: str = "User"

    max_resume_bytes: int = 10 * 1024 * 1024
    max_video_bytes: int = 100 * 1024 * 1024
    allowed_video_types: str = "video/mp4,video/quicktime,video/avi,video/webm"

    cors_origins: str = "http://localhost:5000"

    @field_validator("app_env")
    @classmethod
    def validate_env(cls, value: str) -> str:
        allowed = {"development", "staging", "production", "test"}
        if value not in allowed:
            raise ValueError(f"app_env must be one of {sorted(allowed)}")
        return value

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def allowed_video_type_set(self) -> set[str]:
        return {item.strip() for item in self.allowed_video_types.split(",") if item.strip()}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
