# ============================================================================
# SCOPE: APPLICATION LAYER (Documents)
# Description: Response models for the document ingestion endpoints.
# ============================================================================
"""Document DTOs.

The upload-url endpoint has answered in both snake_case and camelCase, and
with or without an expiry. ``UploadTargetPayload`` accepts every variant and
fills a missing expiry from the configured window.
"""

from datetime import UTC, datetime, timedelta
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from medico_client.config.settings import get_settings

from ...domain.entities.document import UploadTarget


class UploadTargetPayload(BaseModel):
    """Response of ``POST /documents/upload-url``."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    document_id: str = Field(validation_alias=AliasChoices("document_id", "documentId", "id"))
    upload_url: str = Field(validation_alias=AliasChoices("upload_url", "uploadUrl", "url"))
    expires_at: datetime | None = Field(None, validation_alias=AliasChoices("expires_at", "expiry", "expiresAt"))

    @field_validator("document_id", mode="before")
    @classmethod
    def coerce_identifier(cls, value: Any) -> Any:
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator("upload_url")
    @classmethod
    def require_url(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("upload_url cannot be empty")
        return value.strip()

    @field_validator("expires_at")
    @classmethod
    def assume_utc(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    def to_target(self, now: datetime | None = None) -> UploadTarget:
        """Upload target; a missing expiry becomes now + the configured window."""
        expires_at = self.expires_at
        if expires_at is None:
            minutes = get_settings().UPLOAD_URL_EXPIRY_MINUTES
            expires_at = (now or datetime.now(UTC)) + timedelta(minutes=minutes)
        return UploadTarget(url=self.upload_url, expires_at=expires_at)
