from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """
    Client configuration loaded with Pydantic BaseSettings.
    Reads environment variables and an optional .env file.
    """

    # Remote service
    MEDICO_API_BASE_URL: str = Field(
        "https://api.saramedico.com/api/v1", description="Base URL of the scheduling/records API"
    )
    MEDICO_API_TIMEOUT: int = Field(30, description="Request timeout in seconds")
    MEDICO_USER_AGENT: str = Field("SaraMedico-Client/0.1", description="User-Agent sent on every request")

    # Object storage transfers
    STORAGE_UPLOAD_TIMEOUT: int = Field(120, description="Timeout in seconds for raw byte transfers")

    # Document ingestion
    UPLOAD_MAX_FILE_SIZE: int = Field(100 * 1024 * 1024, description="Maximum file size in bytes (100MB)")
    UPLOAD_ALLOWED_MIME_TYPES: Annotated[list[str], NoDecode] = Field(
        default=["application/pdf", "image/jpeg", "image/png", "application/dicom"],
        description="MIME types accepted by the ingestion pipeline",
    )
    UPLOAD_URL_EXPIRY_MINUTES: int = Field(
        15, description="Fallback lifetime of an upload target when the server omits it"
    )

    # Appointments
    CHECK_IN_WINDOW_MINUTES: int = Field(15, description="Minutes before the scheduled time check-in opens")
    DEFAULT_APPROVAL_NOTES: str = Field(
        "Please bring any relevant medical records.", description="Notes sent when a doctor approves without notes"
    )
    DEFAULT_DECLINE_REASON: str = Field(
        "Unable to accommodate at this time.", description="Reason sent when a doctor declines without one"
    )

    # Verification code / password recovery
    OTP_CODE_LENGTH: int = Field(6, description="Number of slots in the one-time code")
    OTP_RESEND_COOLDOWN_SECONDS: int = Field(60, description="Seconds before a new code may be requested")
    PASSWORD_MIN_LENGTH: int = Field(8, description="Minimum accepted password length")

    # Logging
    LOG_LEVEL: str = Field("INFO", description="Log level of the medico_client loggers")
    LOG_JSON: bool = Field(False, description="Emit structured JSON logs instead of colored console lines")

    # Application Settings
    DEBUG: bool = Field(False, description="Debug mode")
    ENVIRONMENT: str = Field("production", description="Runtime environment, stamped on JSON log records")

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("UPLOAD_ALLOWED_MIME_TYPES", mode="before")
    @classmethod
    def parse_allowed_mime_types(cls, value):
        if isinstance(value, str):
            return [mime.strip().lower() for mime in value.split(",") if mime.strip()]
        return value

    @field_validator("MEDICO_API_BASE_URL")
    @classmethod
    def strip_trailing_slash(cls, v):
        return v.rstrip("/")

    @field_validator(
        "MEDICO_API_TIMEOUT",
        "STORAGE_UPLOAD_TIMEOUT",
        "UPLOAD_MAX_FILE_SIZE",
        "UPLOAD_URL_EXPIRY_MINUTES",
        "OTP_CODE_LENGTH",
        "OTP_RESEND_COOLDOWN_SECONDS",
    )
    @classmethod
    def validate_positive(cls, v):
        if v < 1:
            raise ValueError("value must be at least 1")
        return v

    @field_validator("CHECK_IN_WINDOW_MINUTES")
    @classmethod
    def validate_check_in_window(cls, v):
        if v < 0:
            raise ValueError("CHECK_IN_WINDOW_MINUTES must be 0 or greater")
        return v


# Cached configuration singleton
_settings_instance = None


def get_settings() -> Settings:
    """
    Return a cached Settings instance so the environment is read only once.
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance


def reset_settings() -> None:
    """Drop the cached instance (used by tests that patch the environment)."""
    global _settings_instance
    _settings_instance = None
