"""TechWriter configuration: storage location, backup policy, format versions."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables (``TECHWRITER_*``)."""

    # Storage
    database_url: str = "sqlite:///data/techwriter.db"
    run_data_migrations_on_open: bool = True

    # Backups
    app_name: str = "techwriter"
    app_version: str = "1.0.0"
    backup_dir: str = "data/backups"
    max_backups: int = 10
    export_format_version: str = "2.0"
    max_supported_format_version: str = "2.0"

    # Timers
    tick_interval_seconds: float = 1.0

    # Logging (used by scripts)
    log_level: str = "INFO"

    model_config = {
        "env_prefix": "TECHWRITER_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


settings = Settings()
