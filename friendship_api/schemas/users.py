from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

class FriendUserResponse(BaseModel):
    """Public projection of a user as shown in friend lists and search results."""
    id: int
    username: str
    profile_picture: Optional[str] = Field(default=None, alias="profilePicture")

    model_config = ConfigDict(populate_by_name=True)
