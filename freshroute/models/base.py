"""
Base model classes and mixins for FreshRoute Dispatch.
"""
from datetime import datetime
from typing import ClassVar
from uuid import UUID, uuid4

from sqlalchemy import DateTime, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from freshroute.db.database import Base


class TimestampMixin:
    """created_at / updated_at, filled by the database."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.current_timestamp(),
        nullable=False,
    )

    # Also maintained by the update_updated_at_column trigger on PostgreSQL
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.current_timestamp(),
        onupdate=func.current_timestamp(),
        nullable=False,
    )


class UUIDPrimaryKeyMixin:
    """UUID primary key (native uuid on PostgreSQL, CHAR(32) elsewhere)."""

    id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )


class BaseModel(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """
    Abstract base for dispatch tables.

    Subclasses list the columns worth showing in logs in `_repr_fields`.
    """
    __abstract__ = True

    _repr_fields: ClassVar[tuple[str, ...]] = ()

    def __repr__(self) -> str:
        attrs = ", ".join(
            f"{name}={getattr(self, name, None)!r}"
            for name in ("id", *self._repr_fields)
        )
        return f"<{self.__class__.__name__}({attrs})>"
