"""User model — authentication, profile, and role."""

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from staykasa.database import Base, TimestampMixin, UUIDPrimaryKeyMixin

USER_ROLES = ("guest", "host", "admin")


class User(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Marketplace account. Guests book, hosts own properties, admins moderate."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    hashed_password: Mapped[str | None] = mapped_column(String(255), nullable=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    role: Mapped[str] = mapped_column(String(20), default="guest", nullable=False, index=True)

    # Relationships
    properties: Mapped[list["Property"]] = relationship("Property", back_populates="owner", lazy="selectin")  # type: ignore[name-defined]  # noqa: F821

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r} role={self.role!r}>"
