from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SECRET = "changeme-in-production"


class Settings(BaseSettings):
    app_name: str = "MSC Wound Care Form System"
    app_env: str = "development"
    app_version: str = "1.0.0"
    database_url: str = "sqlite:///./woundcare.db"
    storage_path: str = "./uploads"
    max_upload_size_mb: int = 10
    supported_upload_formats: list[str] = [".pdf", ".png", ".jpg", ".jpeg", ".txt"]
    enable_ocr: bool = True
    log_level: str = "INFO"
    session_secret: str = DEFAULT_SECRET
    encryption_key: str = DEFAULT_SECRET
    manufacturers: dict[str, str] = {
        "legacy": "Legacy Medical",
        "stability": "Stability Biologics",
        "advanced": "Advanced Solution",
        "aczdistribution": "ACZ Distribution",
        "medlife": "MedLife Solutions",
    }

    @field_validator("supported_upload_formats")
    @classmethod
    def normalize_formats(cls, value: list[str]) -> list[str]:
        return [fmt.lower() if fmt.startswith(".") else f".{fmt.lower()}" for fmt in value]

    @model_validator(mode="after")
    def require_production_secrets(self) -> "Settings":
        if self.app_env == "production":
            if self.session_secret == DEFAULT_SECRET:
                raise ValueError("SESSION_SECRET must be changed in production")
            if self.encryption_key == DEFAULT_SECRET:
                raise ValueError("ENCRYPTION_KEY must be changed in production")
        return self

    @property
    def max_upload_size_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


settings = Settings()
