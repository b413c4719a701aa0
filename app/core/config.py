from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent.parent

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env.local",
        extra="ignore"
    )

#  Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./freshbread.db"

#  Business-local civil time ("today" for stats, order timestamps)
    BUSINESS_TIMEZONE: str = "America/Los_Angeles"
    BUSINESS_NAME: str = "Fresh Hot Bread"
    BUSINESS_LOCATION: str = "Stockton, CA"

#  Staff auth (secret and password have no defaults; set them in .env.local)
    JWT_SECRET: str
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_DAYS: int = 7
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: str

#  Email notifications (unset user/password disables them)
    EMAIL_USER: str | None = None
    EMAIL_APP_PASS: str | None = None
    OWNER_EMAIL: str | None = None
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 465

#  Orders
    ORDER_LIST_DEFAULT_LIMIT: int = 50
    ENFORCE_STATUS_TRANSITIONS: bool = False

#  Admin poller client
    ADMIN_API_URL: str = "http://localhost:5000"
    ADMIN_POLL_INTERVAL_SECONDS: float = 30.0

    FRONTEND_URL: str | None = None

    APP_NAME: str = "Fresh Hot Bread API"
    DEBUG_MODE: bool = False

    @property
    def email_enabled(self) -> bool:
        return bool(self.EMAIL_USER and self.EMAIL_APP_PASS)

settings = Settings()
