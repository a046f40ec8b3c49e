"""Add friendship table

Revision ID: 3f1c2a9e7b10
Revises:
Create Date: 2026-10-19 09:12:31.402118

"""
import enum
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '3f1c2a9e7b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


class FriendshipStatusEnum(str, enum.Enum):
    PENDING = "pending"    # Sent, waiting for the recipient
    ACCEPTED = "accepted"  # Mutual friends

friendship_status_enum = postgresql.ENUM(*[e.value for e in FriendshipStatusEnum], name="friendshipstatus", create_type=False)

def upgrade() -> None:
    """Create the friendshipstatus enum and the friendship table.

    The users table belongs to the user-management service and must already
    exist.
    """
    friendship_status_enum.create(op.get_bind(), checkfirst=True)

    op.create_table(
        'friendship',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('friend_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('status', friendship_status_enum, nullable=False, server_default="pending"),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint('user_id', 'friend_id', name='uq_friendship_user_friend'),
    )
    op.create_index(op.f('ix_friendship_id'), 'friendship', ['id'])
    op.create_index(op.f('ix_friendship_user_id'), 'friendship', ['user_id'])
    op.create_index(op.f('ix_friendship_friend_id'), 'friendship', ['friend_id'])


def downgrade() -> None:
    """Drop the friendship table and its enum type."""
    op.drop_index(op.f('ix_friendship_friend_id'), table_name='friendship')
    op.drop_index(op.f('ix_friendship_user_id'), table_name='friendship')
    op.drop_index(op.f('ix_friendship_id'), table_name='friendship')
    op.drop_table('friendship')
    friendship_status_enum.drop(op.get_bind(), checkfirst=True)
