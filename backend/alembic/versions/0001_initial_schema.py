"""initial marketplace schema"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


def _enum(name: str, *values: str) -> sa.Enum:
    # Stored as VARCHAR, matching native_enum=False on the models
    return sa.Enum(*values, name=name, native_enum=False)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('password', sa.String(), nullable=False),
        sa.Column('first_name', sa.String(), nullable=False),
        sa.Column('last_name', sa.String(), nullable=False),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('role', _enum('userrole', 'customer', 'provider', 'admin'), nullable=False),
        sa.Column('language', _enum('language', 'latvian', 'russian', 'english'), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('is_verified', sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index(op.f('ix_users_id'), 'users', ['id'])
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    op.create_table(
        'provider_profiles',
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('business_name', sa.String(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('address', sa.String(), nullable=True),
        sa.Column('city', sa.String(), nullable=True),
        sa.Column('postal_code', sa.String(), nullable=True),
        sa.Column('website', sa.String(), nullable=True),
        sa.Column('has_insurance', sa.Boolean(), nullable=False),
        sa.Column('is_verified', sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index(op.f('ix_provider_profiles_user_id'), 'provider_profiles', ['user_id'])

    op.create_table(
        'service_categories',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('slug', sa.String(), nullable=False),
        sa.Column('name_lv', sa.String(), nullable=False),
        sa.Column('name_ru', sa.String(), nullable=False),
        sa.Column('name_en', sa.String(), nullable=False),
        *_timestamps(),
    )
    op.create_index(op.f('ix_service_categories_id'), 'service_categories', ['id'])
    op.create_index(op.f('ix_service_categories_slug'), 'service_categories', ['slug'], unique=True)

    op.create_table(
        'services',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('provider_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column(
            'category_id',
            sa.Integer(),
            sa.ForeignKey('service_categories.id', ondelete='SET NULL'),
            nullable=True,
        ),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('price_type', _enum('pricetype', 'fixed', 'hourly', 'negotiable'), nullable=False),
        sa.Column('currency', sa.String(3), nullable=False),
        sa.Column('duration_minutes', sa.Integer(), nullable=True),
        sa.Column('city', sa.String(), nullable=True),
        sa.Column('is_available', sa.Boolean(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('is_featured', sa.Boolean(), nullable=False),
        sa.Column('average_rating', sa.Float(), nullable=False),
        sa.Column('total_reviews', sa.Integer(), nullable=False),
        *_timestamps(),
    )
    op.create_index(op.f('ix_services_id'), 'services', ['id'])
    op.create_index(op.f('ix_services_provider_id'), 'services', ['provider_id'])
    op.create_index(op.f('ix_services_title'), 'services', ['title'])

    op.create_table(
        'bookings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('customer_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('provider_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('service_id', sa.Integer(), sa.ForeignKey('services.id', ondelete='SET NULL'), nullable=True),
        sa.Column('scheduled_date', sa.Date(), nullable=False),
        sa.Column('scheduled_time', sa.String(5), nullable=False),
        sa.Column('duration_minutes', sa.Integer(), nullable=True),
        sa.Column(
            'status',
            _enum('bookingstatus', 'pending', 'confirmed', 'in_progress', 'completed', 'cancelled'),
            nullable=False,
        ),
        sa.Column('total_amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('address', sa.String(), nullable=False),
        sa.Column('city', sa.String(), nullable=True),
        sa.Column('postal_code', sa.String(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('cancellation_reason', sa.Text(), nullable=True),
        sa.Column('completion_notes', sa.Text(), nullable=True),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.Column('cancelled_at', sa.DateTime(), nullable=True),
        *_timestamps(),
    )
    op.create_index(op.f('ix_bookings_id'), 'bookings', ['id'])
    op.create_index(op.f('ix_bookings_customer_id'), 'bookings', ['customer_id'])
    op.create_index(op.f('ix_bookings_provider_id'), 'bookings', ['provider_id'])
    op.create_index(op.f('ix_bookings_status'), 'bookings', ['status'])

    op.create_table(
        'reviews',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('booking_id', sa.Integer(), sa.ForeignKey('bookings.id'), nullable=False, unique=True),
        sa.Column('customer_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('provider_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('service_id', sa.Integer(), sa.ForeignKey('services.id', ondelete='SET NULL'), nullable=True),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(), nullable=True),
        sa.Column('comment', sa.Text(), nullable=True),
        sa.Column('images', sa.JSON(), nullable=False),
        sa.Column('is_approved', sa.Boolean(), nullable=False),
        sa.Column('provider_response', sa.Text(), nullable=True),
        sa.Column('response_date', sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('customer_id', 'booking_id', name='uq_reviews_customer_booking'),
    )
    op.create_index(op.f('ix_reviews_id'), 'reviews', ['id'])
    op.create_index(op.f('ix_reviews_customer_id'), 'reviews', ['customer_id'])
    op.create_index(op.f('ix_reviews_provider_id'), 'reviews', ['provider_id'])
    op.create_index(op.f('ix_reviews_service_id'), 'reviews', ['service_id'])

    op.create_table(
        'referrals',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('referrer_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('referred_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('referral_code', sa.String(16), nullable=False),
        sa.Column(
            'status',
            _enum('referralstatus', 'pending', 'pending_verification', 'completed'),
            nullable=False,
        ),
        sa.Column('reward_type', _enum('rewardtype', 'premium_month', 'visibility_boost'), nullable=False),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        *_timestamps(),
    )
    op.create_index(op.f('ix_referrals_id'), 'referrals', ['id'])
    op.create_index(op.f('ix_referrals_referrer_id'), 'referrals', ['referrer_id'])
    op.create_index(op.f('ix_referrals_referred_id'), 'referrals', ['referred_id'])
    op.create_index(op.f('ix_referrals_referral_code'), 'referrals', ['referral_code'], unique=True)
    op.create_index(op.f('ix_referrals_status'), 'referrals', ['status'])

    op.create_table(
        'referral_step_completions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('referral_id', sa.Integer(), sa.ForeignKey('referrals.id', ondelete='CASCADE'), nullable=False),
        sa.Column(
            'step',
            _enum(
                'referralstep',
                'email_verification',
                'phone_verification',
                'profile_completion',
                'service_creation',
                'profile_verification',
                'first_booking',
                'review_submission',
            ),
            nullable=False,
        ),
        sa.Column('step_data', sa.JSON(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('referral_id', 'step', name='uq_referral_step'),
    )
    op.create_index(
        op.f('ix_referral_step_completions_referral_id'), 'referral_step_completions', ['referral_id']
    )

    op.create_table(
        'referral_rewards',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('referral_id', sa.Integer(), sa.ForeignKey('referrals.id', ondelete='CASCADE'), nullable=False),
        sa.Column('account_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('reward_type', _enum('rewardtype', 'premium_month', 'visibility_boost'), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('referral_id', 'account_id', 'reward_type', name='uq_referral_reward'),
    )
    op.create_index(op.f('ix_referral_rewards_referral_id'), 'referral_rewards', ['referral_id'])
    op.create_index(op.f('ix_referral_rewards_account_id'), 'referral_rewards', ['account_id'])

    op.create_table(
        'subscriptions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column(
            'user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True
        ),
        sa.Column('plan_type', _enum('plantype', 'free', 'basic', 'premium', 'enterprise'), nullable=False),
        sa.Column('status', _enum('subscriptionstatus', 'active', 'cancelled', 'past_due'), nullable=False),
        sa.Column('current_period_start', sa.DateTime(), nullable=True),
        sa.Column('current_period_end', sa.DateTime(), nullable=True),
        sa.Column('cancel_at_period_end', sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index(op.f('ix_subscriptions_id'), 'subscriptions', ['id'])

    op.create_table(
        'notifications',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column(
            'type',
            _enum(
                'notificationtype',
                'new_booking',
                'booking_status_updated',
                'review_received',
                'referral_completed',
                'info',
            ),
            nullable=False,
        ),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('message', sa.String(), nullable=False),
        sa.Column('link', sa.String(), nullable=True),
        sa.Column('is_read', sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index(op.f('ix_notifications_id'), 'notifications', ['id'])
    op.create_index(op.f('ix_notifications_user_id'), 'notifications', ['user_id'])


def downgrade() -> None:
    for table in (
        'notifications',
        'subscriptions',
        'referral_rewards',
        'referral_step_completions',
        'referrals',
        'reviews',
        'bookings',
        'services',
        'service_categories',
        'provider_profiles',
        'users',
    ):
        op.drop_table(table)
