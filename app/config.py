from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    DATABASE_URL: str
    SECRET_KEY: str
    ACCESS_TOKEN_EXPIRE_DAYS: int = 7
    APP_NAME: str = "Heartline API"
    CORS_ORIGINS: str = "http://localhost:3000"
    LOG_LEVEL: str = "INFO"

    # Email verification
    EMAIL_CODE_EXPIRE_MINUTES: int = 10
    EXPOSE_VERIFICATION_CODE: bool = False

    # Matching
    NEUTRAL_COMPATIBILITY_SCORE: int = 50

    # Messaging
    MESSAGE_MAX_LENGTH: int = 5000
    NOTIFICATION_PREVIEW_LENGTH: int = 100

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


settings = Settings()
