from typing import Literal, Optional
from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )
    backend: Literal["memory", "file", "sql"] = Field(
        default="file", alias="STORAGE_BACKEND"
    )
    path: str = Field(default="data/flashdeck.json", alias="STORAGE_PATH")
    db_url: str = Field(default="sqlite:///data/flashdeck.db", alias="STORAGE_DB_URL")
    key_prefix: str = Field(default="flashdeck_", alias="STORAGE_KEY_PREFIX")


class StudySettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )
    block_size: int = Field(default=25, alias="BLOCK_SIZE")
    reveal_delay_sec: float = Field(default=2.0, alias="REVEAL_DELAY_SEC")
    flip_back_delay_sec: float = Field(default=0.25, alias="FLIP_BACK_DELAY_SEC")


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )
    name: str = Field(default="flashdeck", alias="APP_NAME")
    version: str = Field(default="v1", alias="API_VERSION")
    port: int = Field(default=9000, alias="APP_PORT")
    mode: str = Field(default="prod", alias="MODE")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000"], alias="CORS_ORIGINS"
    )

    @computed_field
    def is_production(self) -> bool:
        return self.mode != "dev"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    app: AppSettings = Field(default_factory=lambda: AppSettings())
    storage: StorageSettings = Field(default_factory=lambda: StorageSettings())
    study: StudySettings = Field(default_factory=lambda: StudySettings())

    gemini_api_key: Optional[str] = Field(default=None, alias="GEMINI_API_KEY")
    openrouter_api_key: Optional[str] = Field(default=None, alias="OPENROUTER_API_KEY")

    # Model provider selection: "google" or "openrouter"
    model_provider: str = Field(default="google", alias="MODEL_PROVIDER")
    words_model: str = Field(default="gemini-2.5-flash", alias="WORDS_MODEL")
    openrouter_model: str = Field(
        default="google/gemini-2.5-flash", alias="OPENROUTER_MODEL"
    )

    # Language the translations are written in
    native_language: str = Field(default="Polish", alias="NATIVE_LANGUAGE")


settings = Settings()
