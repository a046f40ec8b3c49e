import logging
from typing import List, Optional
from fastapi import APIRouter, Body, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from friendship_api.init_db import get_db
from friendship_api.common import get_caller_id, get_current_user
from friendship_api.exceptions import DataAccessFailure, FriendshipError, InvalidRequest
from friendship_api.schemas.friends import (
    AcceptedFriendRequestResponse,
    ErrorResponse,
    FriendRequestCreate,
    FriendshipResponse,
    IncomingFriendRequestResponse,
)
from friendship_api.schemas.users import FriendUserResponse
from friendship_api.services.friends_service import (
    accept_friend_request,
    get_friends,
    get_incoming_requests,
    remove_friend,
    search_users,
    send_friend_request,
)
from friendship_api.utils.id_utils import parse_id

# Configure logging for this module
logger = logging.getLogger(__name__)

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}

# Initialize router with prefix and tags for API documentation
router = APIRouter(prefix="/api/friends", tags=["friends"], responses=ERROR_RESPONSES)

@router.get("", response_model=List[FriendUserResponse])
async def get_friends_api(
    db: AsyncSession = Depends(get_db),
    caller_id: int = Depends(get_caller_id)
):
    """
    Get the accepted friends of the current user.

    Returns:
        List[FriendUserResponse]: The other party of every accepted friendship
    """
    logger.info(f"[GET /api/friends] Fetching friends for userId: {caller_id}")
    try:
        return await get_friends(caller_id, db)
    except FriendshipError:
        raise
    except Exception as e:
        logger.exception(f"[GET /api/friends] Error for userId: {caller_id}")
        raise DataAccessFailure(str(e))

@router.get("/requests", response_model=List[IncomingFriendRequestResponse])
async def get_friend_requests_api(
    db: AsyncSession = Depends(get_db),
    caller_id: int = Depends(get_caller_id)
):
    """
    Get the pending friend requests sent to the current user.

    Returns:
        List[IncomingFriendRequestResponse]: Requests with the requester's profile
    """
    logger.info(f"[GET /api/friends/requests] Fetching friend requests for userId: {caller_id}")
    try:
        return await get_incoming_requests(caller_id, db)
    except FriendshipError:
        raise
    except Exception as e:
        logger.exception(f"[GET /api/friends/requests] Error for userId: {caller_id}")
        raise DataAccessFailure(str(e))

@router.get("/search", response_model=List[FriendUserResponse])
async def search_users_api(
    query: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    caller_id: int = Depends(get_caller_id)
):
    """
    Search users by username that the current user can still add.

    Args:
        query: Case-insensitive substring of the username

    Returns:
        List[FriendUserResponse]: Up to 10 matching users
    """
    if not query:
        logger.info("[GET /api/friends/search] No query provided")
        raise InvalidRequest("Search query is required")

    logger.info(f"[GET /api/friends/search] Searching users for userId: {caller_id} with query: {query}")
    try:
        return await search_users(caller_id, query, db)
    except FriendshipError:
        raise
    except Exception as e:
        logger.exception(f"[GET /api/friends/search] Error for userId: {caller_id}, query: {query}")
        raise DataAccessFailure(str(e))

# Any authenticated caller may read any user's friend list
@router.get("/{user_id}", response_model=List[FriendUserResponse], dependencies=[Depends(get_current_user)])
async def get_user_friends_api(
    user_id: str,
    db: AsyncSession = Depends(get_db)
):
    """
    Get the accepted friends of another user.

    Args:
        user_id: ID of the user whose friends are listed

    Returns:
        List[FriendUserResponse]: The user's friends
    """
    target_id = parse_id(user_id)
    if target_id is None:
        logger.error(f"[GET /api/friends/{user_id}] Invalid userId: {user_id}")
        raise InvalidRequest("Invalid user ID")

    logger.info(f"[GET /api/friends/{user_id}] Fetching friends for userId: {target_id}")
    try:
        return await get_friends(target_id, db)
    except FriendshipError:
        raise
    except Exception as e:
        logger.exception(f"[GET /api/friends/{user_id}] Error for userIdParam: {user_id}")
        raise DataAccessFailure(str(e))

@router.delete("/{friend_id}", status_code=status.HTTP_204_NO_CONTENT, responses={404: {"model": ErrorResponse}})
async def remove_friend_api(
    friend_id: str,
    db: AsyncSession = Depends(get_db),
    caller_id: int = Depends(get_caller_id)
):
    """
    Remove an accepted friend of the current user.

    Args:
        friend_id: ID of the friend to remove

    Raises:
        NotFound: If the users are not accepted friends
    """
    target_id = parse_id(friend_id)
    if target_id is None:
        logger.error(f"[DELETE /api/friends/{friend_id}] Invalid IDs: userId={caller_id}, friendId={friend_id}")
        raise InvalidRequest("Invalid user or friend ID")

    logger.info(f"[DELETE /api/friends/{friend_id}] Removing friend for userId: {caller_id}")
    try:
        await remove_friend(caller_id, target_id, db)
    except FriendshipError:
        raise
    except Exception as e:
        logger.exception(f"[DELETE /api/friends/{friend_id}] Error for userId: {caller_id}, friendId: {friend_id}")
        raise DataAccessFailure(str(e))

    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.post("", response_model=FriendshipResponse, status_code=status.HTTP_201_CREATED)
async def send_friend_request_api(
    request: Optional[FriendRequestCreate] = Body(default=None),
    db: AsyncSession = Depends(get_db),
    caller_id: int = Depends(get_caller_id)
):
    """
    Send a friend request to another user.

    Args:
        request: Body of the form ``{"friendId": <id>}``

    Returns:
        FriendshipResponse: The created pending request
    """
    logger.info(f"[POST /api/friends] Sending friend request from userId: {caller_id}")
    try:
        return await send_friend_request(request, db, caller_id)
    except FriendshipError:
        raise
    except Exception as e:
        friend_id = request.friend_id if request is not None else None
        logger.exception(f"[POST /api/friends] Error for userId: {caller_id}, friendId: {friend_id!r}")
        raise DataAccessFailure(str(e))

@router.put("/{request_id}/accept", response_model=AcceptedFriendRequestResponse)
async def accept_friend_request_api(
    request_id: str,
    db: AsyncSession = Depends(get_db),
    caller_id: int = Depends(get_caller_id)
):
    """
    Accept a pending friend request sent to the current user.

    Args:
        request_id: ID of the friend request

    Returns:
        AcceptedFriendRequestResponse: The accepted request with the requester's profile
    """
    target_id = parse_id(request_id)
    if target_id is None:
        logger.error(f"[PUT /api/friends/{request_id}/accept] Invalid IDs: userId={caller_id}, requestId={request_id}")
        raise InvalidRequest("Invalid user or request ID")

    logger.info(f"[PUT /api/friends/{request_id}/accept] Accepting friend request for userId: {caller_id}")
    try:
        return await accept_friend_request(target_id, db, caller_id)
    except FriendshipError:
        raise
    except Exception as e:
        logger.exception(f"[PUT /api/friends/{request_id}/accept] Error for userId: {caller_id}, requestId: {request_id}")
        raise DataAccessFailure(str(e))
