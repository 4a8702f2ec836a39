from datetime import UTC
from datetime import datetime

from sqlalchemy import DateTime
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.orm import Mapped
from sqlalchemy.orm import MappedAsDataclass
from sqlalchemy.orm import mapped_column


class Base(MappedAsDataclass, AsyncAttrs, DeclarativeBase, kw_only=True):
    """Base class for all SQLAlchemy declarative models in the application.

    This class combines:
      - `MappedAsDataclass` for dataclass-like behavior
      - `AsyncAttrs` for asynchronous attribute access
      - `DeclarativeBase` to enable declarative mapping of Python classes to database tables.
    """

    pass


class DatetimeTrackMixin(MappedAsDataclass, kw_only=True):
    """A mixin tracking the creation and update timestamps of a row.

    The timestamps are usually provided by the domain (so that both are equal
    at creation), the defaults only apply to rows inserted without them.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        default_factory=lambda: datetime.now(UTC),
        nullable=False,
        sort_order=998,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        default_factory=lambda: datetime.now(UTC),
        nullable=False,
        sort_order=999,
    )


class NumericIdMixin(MappedAsDataclass, kw_only=True):
    """A mixin for SQLAlchemy models that provides an auto-incrementing integer primary key."""

    id: Mapped[int] = mapped_column(
        primary_key=True,
        autoincrement=True,
        sort_order=-100,
        init=False,
    )
