"""
User model
Handles authentication and profile information
"""

from sqlalchemy import Column, String

from .base import Base, TimestampedModel, UUIDModel

class User(Base, TimestampedModel, UUIDModel):
    """Registered account; owner or collaborator of wishlists"""

    __tablename__ = "users"

    username = Column(String(30), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)

    # Profile fields
    avatar = Column(String(500), nullable=True)

    def __repr__(self):
        return f"<User {self.username}>"
