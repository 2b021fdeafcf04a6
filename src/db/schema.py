"""Database tables / schema"""

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import JSON, BigInteger
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBGame(Base):
    __tablename__ = "games"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    initial_board: Mapped[str]
    # list of {"uci_move": str, "time_taken": int}
    moves: Mapped[list[dict]] = mapped_column(JSON, default=list)
    # milliseconds (since epoch for start_time) do not fit a 32-bit INTEGER
    start_time: Mapped[int] = mapped_column(BigInteger)
    time_limit: Mapped[int] = mapped_column(BigInteger)
    increment: Mapped[int] = mapped_column(BigInteger)
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)
