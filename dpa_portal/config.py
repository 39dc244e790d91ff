"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database (holds the admin-configured financial year)
    database_url: str = "sqlite:///./dpa_portal.db"

    # External Services
    backend_api_base: str = "http://localhost:8000"

    # Service
    service_name: str = "dpa-portal"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 10.0

    # Reporting
    financial_year_window: int = 5  # Selectable financial years, newest first
    currency_symbol: str = "₦"


settings = Settings()
