from sqlalchemy import Column, Integer, DateTime, ForeignKey, Enum, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from friendship_api.database import Base
from friendship_api.schemas.friends import FriendshipStatus

class Friendship(Base):
    __tablename__ = "friendship"
    __table_args__ = (
        UniqueConstraint("user_id", "friend_id", name="uq_friendship_user_friend"),
    )

    id = Column(Integer, primary_key=True, index=True)
    # Requester
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    # Recipient
    friend_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    status = Column(
        Enum(
            FriendshipStatus,
            name="friendshipstatus",
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        nullable=False,
        default=FriendshipStatus.PENDING,
        server_default=FriendshipStatus.PENDING.value,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    user = relationship("User", foreign_keys=[user_id], back_populates="sent_friendships", lazy="selectin")
    friend = relationship("User", foreign_keys=[friend_id], back_populates="received_friendships", lazy="selectin")
