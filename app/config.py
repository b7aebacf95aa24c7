"""
Configuration and environment variables for the Borrower Outreach Chat service.
"""
from pathlib import Path
from typing import List, Union

from pydantic import field_validator
from pydantic_settings import BaseSettings

DEFAULT_BORROWERS_FILE = str(Path(__file__).parent / "data" / "borrowers.json")


class Settings(BaseSettings):
    """Application settings."""

    # Service Configuration
    app_name: str = "Borrower Outreach Chat"
    version: str = "1.0.0"
    debug: bool = False

    # API Configuration
    api_prefix: str = "/api/v1"

    # Host and Port
    host: str = "0.0.0.0"
    port: int = 8000

    # Logging
    log_level: str = "INFO"

    # Borrower directory fixture
    borrowers_file: str = DEFAULT_BORROWERS_FILE

    # OpenAI Configuration (empty key is reported per call, not at startup)
    openai_api_key: str = ""
    openai_model: str = "gpt-4-turbo"
    openai_temperature: float = 0.7
    openai_max_tokens: int = 500
    openai_timeout: int = 30

    # Email (SMTP over implicit TLS)
    email_host: str = ""
    email_port: int = 465
    email_user: str = ""
    email_pass: str = ""
    email_timeout: int = 30

    # WhatsApp via Twilio
    twilio_account_sid: str = ""
    twilio_auth_token: str = ""
    twilio_phone_number: str = ""
    twilio_api_base: str = "https://api.twilio.com/2010-04-01"
    twilio_timeout: int = 30

    # CORS
    enable_cors: bool = True
    cors_origins: Union[List[str], str] = ["http://localhost:3000"]

    @field_validator("cors_origins", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> List[str]:
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",") if i.strip()]
        return v

    @field_validator("openai_temperature")
    @classmethod
    def validate_temperature(cls, v: float) -> float:
        if not 0.0 <= v <= 2.0:
            raise ValueError("OpenAI temperature must be between 0.0 and 2.0")
        return v

    @field_validator("port", "email_port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        if not 0 < v < 65536:
            raise ValueError("Port must be between 1 and 65535")
        return v

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"  # Ignore extra fields from .env file


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get application settings."""
    return settings
