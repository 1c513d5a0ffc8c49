from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    DATABASE_URL: str = "sqlite:///./pharminc.db"

    # JWT Authentication (no default: the process refuses to start without it)
    JWT_SECRET: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Application
    APP_NAME: str = "Pharminc"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    ALLOWED_ORIGINS: str = "*"

    @field_validator("JWT_SECRET")
    @classmethod
    def validate_secret(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("JWT_SECRET must not be empty")
        return v

    @property
    def allowed_origins(self) -> list[str]:
        """Comma-separated ALLOWED_ORIGINS as a list; empty means permit-all."""
        origins = [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]
        return origins or ["*"]


settings = Settings()
