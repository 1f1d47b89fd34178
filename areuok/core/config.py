from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "sqlite:///./areuok.db"
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # Comma-separated allowed origins, or "*" to allow all.
    # Example: "tauri://localhost,http://localhost:1420"
    CORS_ORIGINS: str = "*"

    # Remote mirror of devices / supervision (optional)
    REMOTE_API_BASE_URL: str = "http://localhost:3000"
    REMOTE_API_TIMEOUT: float = 10.0

    # Daily quote attached to check-in e-mails
    QUOTE_API_URL: str = "https://v1.hitokoto.cn/"
    QUOTE_API_TIMEOUT: float = 5.0

    # When true, cancel_request overwrites accepted/rejected requests too.
    # Set to false to answer 409 REQUEST_NOT_PENDING instead.
    LEDGER_CANCEL_OVERWRITES_TERMINAL: bool = True

    NOTIFICATION_OUTBOX_SIZE: int = 50

    @property
    def cors_origins_list(self) -> list[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def is_test(self) -> bool:
        return self.APP_ENV == "test"


settings = Settings()
