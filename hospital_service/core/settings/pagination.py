"""Pagination settings for search endpoints.

Environment variables use PAGINATION_ prefix.
Example: PAGINATION_DEFAULT_LIMIT=50, PAGINATION_STRICT_CURSORS=true
"""

from __future__ import annotations

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PaginationSettings(BaseSettings):
    """Keyset pagination configuration.

    Attributes:
        default_limit: Page size when the request gives none.
        max_limit: Largest page size served (never above 100).
        strict_cursors: Reject unusable cursors with 400 instead of restarting.
        max_cursor_length: Longest cursor token that is decoded at all.

    Example:
        settings = PaginationSettings()
        paginator = KeysetPaginator.from_settings(adapter, executor, settings)
    """

    default_limit: int = Field(
        default=20,
        ge=1,
        le=100,
        description="Default page size when limit not specified",
    )
    max_limit: int = Field(
        default=100,
        ge=1,
        le=100,
        description="Maximum allowed page size (hard limit)",
    )
    strict_cursors: bool = Field(
        default=False,
        description="Return 400 for unusable cursors instead of restarting from the first page",
    )
    max_cursor_length: int = Field(
        default=512,
        ge=16,
        le=4096,
        description="Cursor tokens longer than this are treated as invalid",
    )

    model_config = SettingsConfigDict(
        env_prefix="PAGINATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )

    @model_validator(mode="after")
    def _default_within_max(self) -> PaginationSettings:
        if self.default_limit > self.max_limit:
            msg = "default_limit must not exceed max_limit"
            raise ValueError(msg)
        return self
