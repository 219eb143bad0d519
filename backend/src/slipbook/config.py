from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Database
    database_url: str

    # Security: tokens are issued by the hosted auth provider
    secret_key: str
    jwt_algorithm: str = "HS256"
    jwt_audience: str | None = None

    # App
    environment: str = "development"
    debug: bool = False
    app_name: str = "Slipbook"
    app_version: str = "0.1.0"

    # OCR
    ocr_languages: list[str] = ["th", "en"]
    ocr_gpu: bool = False
    ocr_monthly_limit: int = 50
    max_upload_bytes: int = 10 * 1024 * 1024  # 10 MB

    # CORS: use JSON array in .env: CORS_ORIGINS=["http://localhost:3000"]
    cors_origins: list[str] = ["http://localhost:3000"]

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    return Settings()
