from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Optional
from datetime import datetime
from enum import Enum as PyEnum
from .users import FriendUserResponse

class FriendshipStatus(str, PyEnum):
    PENDING = "pending"
    ACCEPTED = "accepted"

class FriendRequestCreate(BaseModel):
    # Kept raw so that malformed ids are reported as 400 by the handler
    friend_id: Any = Field(default=None, alias="friendId")

    model_config = ConfigDict(populate_by_name=True)

class FriendshipResponse(BaseModel):
    id: int
    user_id: int = Field(alias="userId")
    friend_id: int = Field(alias="friendId")
    status: FriendshipStatus
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

class AcceptedFriendRequestResponse(FriendshipResponse):
    requester: FriendUserResponse

class IncomingFriendRequestResponse(BaseModel):
    id: int
    user_id: int = Field(alias="userId")
    friend_id: int = Field(alias="friendId")
    requester: FriendUserResponse

    model_config = ConfigDict(populate_by_name=True)

class ErrorResponse(BaseModel):
    message: str
    error: Optional[str] = None
