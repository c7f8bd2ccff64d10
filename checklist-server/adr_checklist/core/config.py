"""Application configuration using pydantic settings with structured sections."""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False


class DatabaseSettings(BaseModel):
    url: str = Field(default="sqlite+aiosqlite:///./adr_checklist.db", alias="url")
    echo: bool = False
    pool_size: Optional[int] = None
    max_overflow: Optional[int] = None


class SecuritySettings(BaseModel):
    secret_key: str = Field(default="change-me", min_length=8)
    algorithm: str = "HS256"
    admin_username: str = "admin"
    # bcrypt hash; deletion is refused while this is unset
    admin_password_hash: Optional[str] = None
    cron_secret: str = ""


class StorageSettings(BaseModel):
    root: Path = Field(default=Path("storage"))
    bucket: str = "adr-checklists"
    public_base_url: str = "http://localhost:8000"
    link_ttl_seconds: int = 60 * 60


class RetentionSettings(BaseModel):
    days: int = 60
    sweep_batch_size: int = 200


class RenderingSettings(BaseModel):
    assets_dir: Path = Field(default=Path("assets/images"))
    watermark_file: str = "watermark.png"
    watermark_opacity: float = 0.12


class MailSettings(BaseModel):
    host: Optional[str] = None
    port: int = 587
    user: Optional[str] = None
    password: Optional[str] = None
    sender_name: str = "ADR Checklist System"
    timeout: int = 10


class InspectorSettings(BaseModel):
    color: str = "#0F172A"
    emails: list[str] = Field(default_factory=list)


class Settings(BaseSettings):
    """Top-level application settings with nested sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
    )

    environment: Literal["development", "staging", "production", "test"] = "development"
    debug: bool = False
    project_name: str = "ADR Checklist Service"
    api_prefix: str = "/api"

    server: ServerSettings = ServerSettings()
    database: DatabaseSettings = DatabaseSettings()
    security: SecuritySettings = SecuritySettings()
    storage: StorageSettings = StorageSettings()
    retention: RetentionSettings = RetentionSettings()
    rendering: RenderingSettings = RenderingSettings()
    mail: MailSettings = MailSettings()

    # INSPECTORS='{"Jane Doe": {"color": "#1E90FF", "emails": ["jane@example.com"]}}'
    inspectors: dict[str, InspectorSettings] = Field(default_factory=dict)

    photo_fetch_timeout: float = 20.0

    @property
    def database_url(self) -> str:
        return self.database.url

    @property
    def secret_key(self) -> str:
        return self.security.secret_key

    @property
    def algorithm(self) -> str:
        return self.security.algorithm

    @property
    def bucket_dir(self) -> Path:
        return self.storage.root / self.storage.bucket

    @property
    def download_route(self) -> str:
        return f"{self.storage.public_base_url.rstrip('/')}{self.api_prefix}/artifacts/download"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
