from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="STOCKFLOW_",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str = "sqlite:///data/stockflow.db"
    sqlite_busy_timeout: float = Field(
        default=30.0,
        description="Seconds a SQLite writer waits for the database lock",
    )
    echo_sql: bool = False

    # Logging
    log_level: str = "INFO"

    # Low-stock alerts
    alert_queue_size: int = Field(default=1000, gt=0)
