"""
Configuration module for Patient Records Service.
Uses Pydantic BaseSettings for validation - app fails fast on malformed config.
"""
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Templates ship inside the service directory, next to main.py
DEFAULT_TEMPLATES_DIR = str(Path(__file__).resolve().parent.parent / "templates")


class Settings(BaseSettings):
    """
    Application settings with validation.
    Values come from environment variables or a local .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database Configuration
    patient_records_db_dir: str = Field(default="data", description="Database directory")
    patient_records_db_file: str = Field(default="patient_records.db", description="Database filename")
    patient_records_db_busy_timeout: int = Field(default=5000, description="SQLite busy timeout in milliseconds")

    # Web Server Configuration
    patient_records_host: str = Field(default="0.0.0.0", description="Server host")
    patient_records_port: int = Field(default=8000, description="Server port")
    patient_records_reload: bool = Field(default=False, description="Enable hot reload")

    # Views
    patient_records_templates_dir: str = Field(
        default=DEFAULT_TEMPLATES_DIR,
        description="Directory containing Jinja2 view templates",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Root log level")
    log_format: str = Field(default="json", description="Log format: json or text")

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, value: str) -> str:
        """Only the two supported formatter styles are accepted."""
        value = value.lower()
        if value not in ("json", "text"):
            raise ValueError("log_format must be 'json' or 'text'")
        return value

    @property
    def database_path(self) -> str:
        """Get the full database path."""
        return str(Path(self.patient_records_db_dir) / self.patient_records_db_file)

    def ensure_directories(self) -> None:
        """Ensure required directories exist."""
        Path(self.patient_records_db_dir).mkdir(parents=True, exist_ok=True)


# Create global settings instance - fails fast if config is malformed
settings = Settings()

DATABASE_PATH = settings.database_path
DATABASE_BUSY_TIMEOUT = settings.patient_records_db_busy_timeout

SERVER_HOST = settings.patient_records_host
SERVER_PORT = settings.patient_records_port
SERVER_RELOAD = settings.patient_records_reload
