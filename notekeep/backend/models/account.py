"""
Account Model.

A person who signs up and owns notes, contacts and files. Signs in either
with a local password or through an external identity provider, in which
case external_id holds the provider's user reference.
"""

from sqlalchemy import Index, String, text
from sqlalchemy.orm import Mapped, mapped_column

from notekeep.backend.models.base import Base, SoftDeleteMixin, TimestampMixin, UUIDMixin

_LIVE_ROWS = text("deleted_at IS NULL")


class Account(UUIDMixin, TimestampMixin, SoftDeleteMixin, Base):
    """Account database model."""

    __tablename__ = "users"
    __table_args__ = (
        # Uniqueness only among live accounts so a deleted email can sign up again
        Index(
            "uq_users_email_live",
            "email",
            unique=True,
            postgresql_where=_LIVE_ROWS,
            sqlite_where=_LIVE_ROWS,
        ),
        Index(
            "uq_users_external_id_live",
            "external_id",
            unique=True,
            postgresql_where=_LIVE_ROWS,
            sqlite_where=_LIVE_ROWS,
        ),
    )

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    external_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    password_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)
    image_url: Mapped[str | None] = mapped_column(String(2048), nullable=True)

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __repr__(self) -> str:
        return f"<Account(id={self.id}, email={self.email!r})>"
