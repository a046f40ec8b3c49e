from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from friendship_api.database import Base

class User(Base):
    """Read-only view of the account table owned by the user-management service."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    profile_picture = Column(String, nullable=True)

    # Relationships
    sent_friendships = relationship("Friendship", foreign_keys="Friendship.user_id", back_populates="user")
    received_friendships = relationship("Friendship", foreign_keys="Friendship.friend_id", back_populates="friend")
