from enum import Enum

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from wearly.db.base import Base


class AccountKind(str, Enum):
    REGULAR = "regular"
    COMPANY = "company"


class User(Base):
    """Profile row: identity plus denormalized follow counters."""

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(50), nullable=False, unique=True, index=True)
    full_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    account_kind: Mapped[str] = mapped_column(
        String(20), nullable=False, default=AccountKind.REGULAR.value, server_default=AccountKind.REGULAR.value
    )

    # Denormalized counters, only changed by follow_service
    followers_count: Mapped[int] = mapped_column(Integer, default=0, server_default="0", nullable=False)
    following_count: Mapped[int] = mapped_column(Integer, default=0, server_default="0", nullable=False)

    @property
    def display_name(self) -> str:
        return self.full_name or self.username or "Someone"
