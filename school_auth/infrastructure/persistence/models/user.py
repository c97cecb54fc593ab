"""User database model.

Security:
    - password_hash: NEVER stores plaintext passwords (bcrypt hashed)
    - failed_login_count / locked_until: progressive lockout state
    - refresh_token: current opaque refresh token (single active token)

Concurrency:
    - version: optimistic concurrency token. Every successful write
      increments it; a write carrying a stale version matches no row.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import Boolean, DateTime, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from school_auth.infrastructure.persistence.base import BaseModel
from school_auth.infrastructure.persistence.models.session import SessionModel


class UserModel(BaseModel):
    """Persisted shape of the User aggregate.

    Indexes:
        - email: unique, for login lookups
        - refresh_token: for token refresh lookups
        - school_id: for per-school listings

    Relationships:
        - sessions: one-to-many, loaded eagerly with the user
    """

    __tablename__ = "auth_users"

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
        comment="User email address (unique, normalized lowercase)",
    )
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password",
    )
    password_changed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )

    role: Mapped[str] = mapped_column(String(50), nullable=False)
    school_id: Mapped[UUID | None] = mapped_column(Uuid, nullable=True, index=True)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    email_confirmed: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )

    failed_login_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0
    )
    locked_until: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    refresh_token: Mapped[str | None] = mapped_column(
        String(255), nullable=True, index=True
    )
    refresh_token_expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    last_login_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )

    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    sessions: Mapped[list[SessionModel]] = relationship(
        SessionModel,
        lazy="selectin",
        order_by=SessionModel.started_at,
    )
