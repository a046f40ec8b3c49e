import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from friendship_api.models import Friendship
from friendship_api.schemas.friends import FriendshipStatus


def test_same_direction_duplicate_is_rejected_by_the_store(sync_engine, make_user, make_friendship):
    alice = make_user("alice")
    bob = make_user("bob")
    make_friendship(alice, bob, FriendshipStatus.PENDING)

    with Session(sync_engine) as session:
        session.add(Friendship(user_id=alice.id, friend_id=bob.id, status=FriendshipStatus.ACCEPTED))
        with pytest.raises(IntegrityError):
            session.commit()


def test_status_is_stored_as_lowercase_value(sync_engine, make_user, make_friendship):
    alice = make_user("alice")
    bob = make_user("bob")
    make_friendship(alice, bob)

    with sync_engine.connect() as connection:
        stored = connection.exec_driver_sql("SELECT status FROM friendship").scalar_one()
    assert stored == "pending"


def test_status_defaults_to_pending_in_the_store(sync_engine, make_user):
    alice = make_user("alice")
    bob = make_user("bob")

    with sync_engine.begin() as connection:
        connection.exec_driver_sql(f"INSERT INTO friendship (user_id, friend_id) VALUES ({alice.id}, {bob.id})")
        stored = connection.exec_driver_sql("SELECT status FROM friendship").scalar_one()
    assert stored == "pending"
