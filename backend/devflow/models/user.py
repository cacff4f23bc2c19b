"""
DevFlow Backend — User and Account Models
===========================================

User:     profile + reputation counter. `email` and `username` are unique.
Account:  a credential linked to a user. One row per (provider,
          provider_account_id); the `credentials` provider stores a bcrypt
          hash in `password`, OAuth providers leave it NULL.
"""

import uuid
from typing import Optional

from sqlalchemy import ForeignKey, Integer, String, Text, UniqueConstraint, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from devflow.database import Base
from devflow.models.common import IdentifiedMixin


class User(IdentifiedMixin, Base):
    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    username: Mapped[str] = mapped_column(String(30), nullable=False, unique=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    image: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    location: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    portfolio: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    reputation: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=text("0")
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"


class Account(IdentifiedMixin, Base):
    __tablename__ = "accounts"

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    image: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    password: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    provider: Mapped[str] = mapped_column(String(50), nullable=False)
    provider_account_id: Mapped[str] = mapped_column(String(255), nullable=False)

    __table_args__ = (
        UniqueConstraint(
            "provider", "provider_account_id", name="uq_accounts_provider_account"
        ),
    )

    def __repr__(self) -> str:
        return f"<Account(provider='{self.provider}', user_id={self.user_id})>"
