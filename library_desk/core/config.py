from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str = Field("sqlite+aiosqlite:///./library_desk.db", alias="DATABASE_URL")

    library_name: str = Field("PATCH - The Smart Library", alias="LIBRARY_NAME")
    receipt_prefix: str = Field("PATCH", alias="RECEIPT_PREFIX")
    batch_delay_seconds: float = Field(0.1, alias="BATCH_DELAY_SECONDS", ge=0)

    legacy_password_salt: str = Field("patch_salt_2024", alias="LEGACY_PASSWORD_SALT")
    bcrypt_rounds: int = Field(12, alias="BCRYPT_ROUNDS", ge=4, le=31)

    default_country_code: str = Field("91", alias="DEFAULT_COUNTRY_CODE")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
