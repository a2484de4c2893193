from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path


class Settings(BaseSettings):
    APP_NAME: str = "Money Manager Backend"
    ENV: str = "dev"

    # SQLite file next to the project root, absolute so the CWD does not matter
    _default_db_path = Path(__file__).resolve().parents[2] / "db.sqlite3"
    DATABASE_URL: str = f"sqlite:///{_default_db_path}"

    CORS_ORIGINS: list[str] = ["*"]
    TIMEZONE: str = "Asia/Jakarta"
    DEFAULT_CURRENCY: str = "IDR"
    LOG_LEVEL: str = "INFO"

    XP_PER_TRANSACTION: int = 50
    RECENT_TRANSACTIONS_LIMIT: int = 5

    model_config = SettingsConfigDict(env_file=(".env",), env_prefix="MONEY_", case_sensitive=False)


settings = Settings()
