import logging
from typing import List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_, or_
from sqlalchemy.orm import joinedload
from friendship_api.exceptions import InvalidRequest, NotFound
from friendship_api.models import User, Friendship
from friendship_api.schemas.friends import (
    AcceptedFriendRequestResponse,
    FriendRequestCreate,
    FriendshipResponse,
    FriendshipStatus,
    IncomingFriendRequestResponse,
)
from friendship_api.schemas.users import FriendUserResponse
from friendship_api.utils.id_utils import parse_id
from friendship_api.utils.media_utils import profile_picture_url

# Configure logging for this module
logger = logging.getLogger(__name__)

SEARCH_RESULT_LIMIT = 10

DUPLICATE_REQUEST_MESSAGE = "Friendship request already exists or user is already a friend"

def to_friend_user(user: User) -> FriendUserResponse:
    return FriendUserResponse(
        id=user.id,
        username=user.username,
        profile_picture=profile_picture_url(user.profile_picture),
    )

def _between(user_id: int, other_id: int):
    """Condition matching a friendship row for the pair in either direction."""
    return or_(
        and_(Friendship.user_id == user_id, Friendship.friend_id == other_id),
        and_(Friendship.user_id == other_id, Friendship.friend_id == user_id),
    )

async def get_friends(user_id: int, db: AsyncSession) -> List[FriendUserResponse]:
    """
    Get the accepted friends of a user.

    A friendship is symmetric once accepted, so rows where the user is either
    the requester or the recipient count, and the other party is returned.

    Args:
        user_id: ID of the user whose friends are listed
        db: AsyncSession for database operations

    Returns:
        List[FriendUserResponse]: The other party of every accepted friendship
    """
    result = await db.execute(
        select(Friendship)
        .options(joinedload(Friendship.user), joinedload(Friendship.friend))
        .where(
            or_(Friendship.user_id == user_id, Friendship.friend_id == user_id),
            Friendship.status == FriendshipStatus.ACCEPTED,
        )
        .order_by(Friendship.id)
    )
    friendships = result.scalars().all()

    friends = []
    for friendship in friendships:
        other = friendship.friend if friendship.user_id == user_id else friendship.user
        friends.append(to_friend_user(other))

    logger.info(f"Fetched {len(friends)} friends for userId: {user_id}")
    return friends

async def get_incoming_requests(user_id: int, db: AsyncSession) -> List[IncomingFriendRequestResponse]:
    """
    Get the pending friend requests addressed to a user.

    Args:
        user_id: ID of the recipient
        db: AsyncSession for database operations

    Returns:
        List[IncomingFriendRequestResponse]: Pending requests with the requester's profile
    """
    result = await db.execute(
        select(Friendship)
        .options(joinedload(Friendship.user))
        .where(
            Friendship.friend_id == user_id,
            Friendship.status == FriendshipStatus.PENDING,
        )
        .order_by(Friendship.id)
    )
    requests = result.scalars().all()

    logger.info(f"Fetched {len(requests)} friend requests for userId: {user_id}")
    return [
        IncomingFriendRequestResponse(
            id=request.id,
            user_id=request.user_id,
            friend_id=request.friend_id,
            requester=to_friend_user(request.user),
        )
        for request in requests
    ]

async def search_users(user_id: int, query: str, db: AsyncSession) -> List[FriendUserResponse]:
    """
    Find users the caller could add as a friend.

    Matches usernames containing ``query`` case-insensitively. The caller and
    users already accepted as friends in either direction are left out.
    Pending requests do not exclude a user.

    Args:
        user_id: ID of the caller
        query: Substring to look for; ``%`` and ``_`` are matched literally
        db: AsyncSession for database operations

    Returns:
        List[FriendUserResponse]: At most SEARCH_RESULT_LIMIT users, ordered by id
    """
    sent_and_accepted = (
        select(Friendship.id)
        .where(
            Friendship.user_id == User.id,
            Friendship.friend_id == user_id,
            Friendship.status == FriendshipStatus.ACCEPTED,
        )
        .exists()
    )
    received_and_accepted = (
        select(Friendship.id)
        .where(
            Friendship.friend_id == User.id,
            Friendship.user_id == user_id,
            Friendship.status == FriendshipStatus.ACCEPTED,
        )
        .exists()
    )

    result = await db.execute(
        select(User)
        .where(
            User.username.icontains(query, autoescape=True),
            User.id != user_id,
            ~sent_and_accepted,
            ~received_and_accepted,
        )
        .order_by(User.id)
        .limit(SEARCH_RESULT_LIMIT)
    )
    users = result.scalars().all()

    logger.info(f"Found {len(users)} users for userId: {user_id} with query: {query}")
    return [to_friend_user(user) for user in users]

async def remove_friend(user_id: int, friend_id: int, db: AsyncSession) -> None:
    """
    Delete the accepted friendship between two users.

    Either party may remove it, whichever of them sent the original request.

    Raises:
        NotFound: If the two users are not accepted friends
    """
    result = await db.execute(
        select(Friendship).where(
            _between(user_id, friend_id),
            Friendship.status == FriendshipStatus.ACCEPTED,
        )
    )
    friendship = result.scalars().first()

    if friendship is None:
        logger.info(f"Friendship between {user_id} and {friend_id} not found")
        raise NotFound("Friendship not found")

    await db.delete(friendship)
    await db.commit()
    logger.info(f"Friendship {friendship.id} between {user_id} and {friend_id} removed")

async def send_friend_request(
    request: Optional[FriendRequestCreate], db: AsyncSession, user_id: int
) -> FriendshipResponse:
    """
    Send a friend request from the caller to another user.

    Args:
        request: Body holding the target ``friendId``, None when no body was sent
        db: AsyncSession for database operations
        user_id: ID of the caller

    Returns:
        FriendshipResponse: The created pending friendship

    Raises:
        InvalidRequest: If the target is missing, malformed, unknown or the
            caller, or if any friendship row already links the pair
    """
    raw_friend_id = request.friend_id if request is not None else None
    friend_id = parse_id(raw_friend_id)

    # Prevent self-friending; a zero id is treated as missing
    if not friend_id or friend_id == user_id:
        logger.error(f"Invalid IDs: userId={user_id}, friendId={raw_friend_id!r}")
        raise InvalidRequest("Invalid user or friend ID")

    target_user = await db.get(User, friend_id)
    if target_user is None:
        logger.error(f"Target user {friend_id} does not exist")
        raise InvalidRequest("Invalid user or friend ID")

    # Any status counts: pending in either direction or already friends
    result = await db.execute(select(Friendship).where(_between(user_id, friend_id)).limit(1))
    existing = result.scalars().first()
    if existing is not None:
        logger.info(f"Friendship already exists: id={existing.id}, status={existing.status.value}")
        raise InvalidRequest(DUPLICATE_REQUEST_MESSAGE)

    friendship = Friendship(
        user_id=user_id,
        friend_id=friend_id,
        status=FriendshipStatus.PENDING,
    )
    db.add(friendship)
    try:
        await db.commit()
    except IntegrityError:
        # A concurrent request for the same pair committed first
        await db.rollback()
        logger.warning(f"Concurrent friend request from {user_id} to {friend_id} rejected by unique constraint")
        raise InvalidRequest(DUPLICATE_REQUEST_MESSAGE)
    await db.refresh(friendship)

    logger.info(f"Friend request {friendship.id} created from userId: {user_id} to friendId: {friend_id}")
    return FriendshipResponse(
        id=friendship.id,
        user_id=friendship.user_id,
        friend_id=friendship.friend_id,
        status=friendship.status,
        created_at=friendship.created_at,
        updated_at=friendship.updated_at,
    )

async def accept_friend_request(
    request_id: int, db: AsyncSession, user_id: int
) -> AcceptedFriendRequestResponse:
    """
    Accept a pending friend request addressed to the caller.

    Args:
        request_id: ID of the friendship row
        db: AsyncSession for database operations
        user_id: ID of the caller, who must be the recipient

    Returns:
        AcceptedFriendRequestResponse: The updated row with the requester's profile

    Raises:
        InvalidRequest: If the request does not exist, is addressed to someone
            else, or is no longer pending
    """
    result = await db.execute(
        select(Friendship)
        .options(joinedload(Friendship.user))
        .where(Friendship.id == request_id)
    )
    friend_request = result.scalar_one_or_none()

    if (
        friend_request is None
        or friend_request.friend_id != user_id
        or friend_request.status != FriendshipStatus.PENDING
    ):
        logger.info(f"Invalid or unauthorized request {request_id} for userId: {user_id}")
        raise InvalidRequest("Invalid or unauthorized friend request")

    friend_request.status = FriendshipStatus.ACCEPTED
    await db.commit()
    await db.refresh(friend_request, attribute_names=["status", "updated_at"])

    logger.info(f"Friend request {request_id} accepted by userId: {user_id}")
    return AcceptedFriendRequestResponse(
        id=friend_request.id,
        user_id=friend_request.user_id,
        friend_id=friend_request.friend_id,
        status=friend_request.status,
        created_at=friend_request.created_at,
        updated_at=friend_request.updated_at,
        requester=to_friend_user(friend_request.user),
    )
