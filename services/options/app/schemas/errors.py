from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Body returned for every handled error, regardless of option kind."""

    detail: str
    status: str = "Error"
    status_code: int
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    errors: list[dict[str, Any]] | None = None

    def to_content(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)
