"""Base model with common fields."""

from datetime import datetime, timezone
from typing import Optional
from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    """Waktu sekarang dalam UTC (timezone-aware)."""
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalisasi ke UTC aware; nilai naive dianggap sudah UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class TimestampMixin(SQLModel):
    """Mixin for timestamp fields."""
    created_at: datetime = Field(default_factory=utcnow, index=True, sa_type=DateTime(timezone=True))
    updated_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))


class AuditMixin(SQLModel):
    """Mixin for audit fields (ID user dari identity provider)."""
    created_by: Optional[str] = Field(default=None, max_length=36)
    updated_by: Optional[str] = Field(default=None, max_length=36)


class BaseModel(TimestampMixin, AuditMixin):
    """Base model with all common fields."""
    pass
