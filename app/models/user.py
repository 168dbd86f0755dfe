"""ORM model for user accounts (credential store)."""

from sqlalchemy import Column, DateTime, Integer, String, Text, func

from app.core.security import BCRYPT_ROUNDS, hash_password
from app.models.base import Base


class User(Base):
    """
    Registered account: unique email, bcrypt password hash and the latest
    refresh token issued at login.

    Build new rows with from_credentials so the plaintext password never
    reaches the table.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    refresh_token = Column(Text, nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    @classmethod
    def from_credentials(
        cls, email: str, plain_password: str, rounds: int = BCRYPT_ROUNDS
    ) -> "User":
        """Hash the password and return an unsaved User."""
        return cls(email=email, password_hash=hash_password(plain_password, rounds))

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r}>"
