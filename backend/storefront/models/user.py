import uuid

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from storefront.db.base import Base, TimestampMixin, uuid_pk


class User(TimestampMixin, Base):
    """A merchant account, keyed by the identity provider's ``sub``."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = uuid_pk()
    cognito_sub: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default="true")

    @classmethod
    def from_claims(cls, claims: dict) -> "User":
        """New account from access-token claims (first request by this merchant)."""
        sub = claims["sub"]
        email = claims.get("email") or f"{sub}@placeholder.local"
        return cls(cognito_sub=sub, email=email, full_name=claims.get("name") or email)
