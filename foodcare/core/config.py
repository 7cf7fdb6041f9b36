from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_NAME: str = "FoodCare Subscriptions"
    version: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    APP_DOMAIN: str = "example.com"
    APP_DATABASE_DSN: str = "sqlite:////tmp/foodcare.db"
    REDIS_URL: str = "redis://localhost:6379"

    # Customer-facing frontend, used to build confirmation links
    APP_URL: str = "http://localhost:5173"

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    # SMTP (empty host disables sending)
    SMTP_HOST: str = ""
    SMTP_PORT: int = 587
    SMTP_USERNAME: str = ""
    SMTP_PASSWORD: str = ""
    SMTP_FROM_EMAIL: str = "no-reply@example.com"
    SMTP_FROM_NAME: str = "Food & Care"
    SMTP_USE_TLS: bool = True

    # Customer bearer tokens are issued by the auth service and only verified here
    AUTH_JWT_SECRET: str = "change-me"
    AUTH_JWT_ALGORITHM: str = "HS256"

    # Reminders
    REMINDER_DAYS_BEFORE: int = 3
    CONFIRMATION_TOKEN_TTL_DAYS: int = 7
    CONFIRMATION_TOKEN_BYTES: int = 32

    # Rate limiting
    RATE_LIMIT_CONFIRMATIONS_PER_MINUTE: int = 30


settings = Settings()
