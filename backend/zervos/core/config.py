from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_NAME: str = "Zervos Dashboard State"
    version: str = "0.1.0"
    DEBUG: bool = False
    APP_ORIGIN: str = "http://localhost:5000"
    APP_DATABASE_DSN: str = "sqlite:////tmp/zervos.db"

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    # Notification popups
    POPUP_POLL_INTERVAL_SECONDS: float = 1.0
    POPUP_DISMISS_SECONDS: float = 5.0
    POPUP_MAX_VISIBLE: int = 5
    POPUP_SEEN_IDS: int = 100  # ids remembered for de-duplication
    NOTIFICATION_SOUND_PATH: str = "public/notification.wav"

    # SMTP (empty host disables sending)
    SMTP_HOST: str = ""
    SMTP_PORT: int = 587
    SMTP_USERNAME: str = ""
    SMTP_PASSWORD: str = ""
    SMTP_FROM_EMAIL: str = "billing@example.com"
    SMTP_FROM_NAME: str = "Zervos"
    SMTP_USE_TLS: bool = True


settings = Settings()
