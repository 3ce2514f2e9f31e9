"""direct messages between accounts"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0002_messages'
down_revision = '0001_initial_schema'
branch_labels = None
depends_on = None


def upgrade() -> None:
    # notificationtype is a VARCHAR sized for its longest value, so the new
    # 'new_message' value needs no column change.
    op.create_table(
        'messages',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('sender_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('receiver_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('booking_id', sa.Integer(), sa.ForeignKey('bookings.id', ondelete='SET NULL'), nullable=True),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column(
            'message_type',
            sa.Enum('text', 'image', 'file', 'system', name='messagetype', native_enum=False),
            nullable=False,
        ),
        sa.Column('attachments', sa.JSON(), nullable=False),
        sa.Column('is_read', sa.Boolean(), nullable=False),
        sa.Column('read_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index(op.f('ix_messages_id'), 'messages', ['id'])
    op.create_index(op.f('ix_messages_sender_id'), 'messages', ['sender_id'])
    op.create_index(op.f('ix_messages_receiver_id'), 'messages', ['receiver_id'])
    op.create_index(op.f('ix_messages_booking_id'), 'messages', ['booking_id'])
    op.create_index('ix_messages_pair_time', 'messages', ['sender_id', 'receiver_id', 'created_at'])


def downgrade() -> None:
    op.drop_table('messages')
