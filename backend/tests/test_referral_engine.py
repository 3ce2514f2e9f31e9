import pytest
from sqlalchemy.exc import IntegrityError

from app.models import (
    BookingStatus,
    NotificationType,
    PlanType,
    ReferralReward,
    ReferralStatus,
    ReferralStep,
    Review,
    RewardType,
    Subscription,
    UserRole,
)
from app.services.referral_engine import ReferralRewardEngine
from app.utils import referral_codes
from app.utils.errors import (
    AlreadyUsedError,
    InternalError,
    InvalidStateError,
    NotFoundError,
    SelfReferralError,
    VerificationFailedError,
)

PHONE = "+37120000000"

CUSTOMER_STEPS = [
    ReferralStep.EMAIL_VERIFICATION,
    ReferralStep.PHONE_VERIFICATION,
    ReferralStep.PROFILE_COMPLETION,
    ReferralStep.FIRST_BOOKING,
    ReferralStep.REVIEW_SUBMISSION,
]

PROVIDER_STEPS = [
    ReferralStep.EMAIL_VERIFICATION,
    ReferralStep.PHONE_VERIFICATION,
    ReferralStep.PROFILE_COMPLETION,
    ReferralStep.SERVICE_CREATION,
    ReferralStep.PROFILE_VERIFICATION,
    ReferralStep.FIRST_BOOKING,
]


@pytest.fixture
def engine(db, sink):
    return ReferralRewardEngine(db, sink)


@pytest.fixture
def fixed_code(monkeypatch):
    monkeypatch.setattr(referral_codes, "generate_referral_code", lambda length=8: "ABCD1234")


def _complete_customer_checklist(db, account, make_user, make_service, make_booking):
    provider = make_user(role=UserRole.PROVIDER)
    service = make_service(provider)
    booking = make_booking(account, service, status=BookingStatus.COMPLETED)
    db.add(
        Review(
            booking_id=booking.id,
            customer_id=account.id,
            provider_id=provider.id,
            service_id=service.id,
            rating=5,
        )
    )
    db.commit()


def test_customer_scenario_with_fixed_code(
    db, engine, sink, fixed_code, make_user, make_service, make_booking
):
    referrer = make_user()
    referred = make_user(phone=PHONE, is_verified=True)

    referral = engine.generate_code(referrer.id)
    assert referral.referral_code == "ABCD1234"
    assert referral.reward_type == RewardType.PREMIUM_MONTH

    applied = engine.apply_code(referred.id, "abcd1234")
    assert applied.referral_id == referral.id
    assert applied.verification_steps == CUSTOMER_STEPS
    db.refresh(referral)
    assert referral.status == ReferralStatus.PENDING_VERIFICATION
    assert referral.referred_id == referred.id

    engine.complete_step(referral.id, referred.id, ReferralStep.EMAIL_VERIFICATION)
    engine.complete_step(referral.id, referred.id, ReferralStep.PHONE_VERIFICATION, {"phone": PHONE})
    result = engine.complete_step(referral.id, referred.id, ReferralStep.PROFILE_COMPLETION)
    assert result.remaining_steps == [ReferralStep.FIRST_BOOKING, ReferralStep.REVIEW_SUBMISSION]
    assert result.all_steps_completed is False

    _complete_customer_checklist(db, referred, make_user, make_service, make_booking)
    engine.complete_step(referral.id, referred.id, ReferralStep.FIRST_BOOKING)
    result = engine.complete_step(referral.id, referred.id, ReferralStep.REVIEW_SUBMISSION)

    assert result.all_steps_completed is True
    assert result.remaining_steps == []
    assert result.referral.status == ReferralStatus.COMPLETED
    assert result.referral.completed_at is not None
    assert [e.type for e in sink.for_account(referrer.id)] == [NotificationType.REFERRAL_COMPLETED]
    assert [e.type for e in sink.for_account(referred.id)] == [NotificationType.REFERRAL_COMPLETED]


def test_round_trip_rewards_each_party_once(
    db, engine, make_user, make_service, make_booking
):
    referrer = make_user()
    referred = make_user(phone=PHONE, is_verified=True)
    _complete_customer_checklist(db, referred, make_user, make_service, make_booking)

    referral = engine.generate_code(referrer.id)
    engine.apply_code(referred.id, referral.referral_code)
    for step in CUSTOMER_STEPS:
        engine.complete_step(referral.id, referred.id, step, {"phone": PHONE})

    # Completing again is a no-op for the loser of the status update
    assert engine.complete_referral(referral.id) is False

    rewards = db.query(ReferralReward).filter(ReferralReward.referral_id == referral.id).all()
    assert sorted((r.account_id, r.reward_type) for r in rewards) == sorted(
        [(referrer.id, RewardType.PREMIUM_MONTH), (referred.id, RewardType.PREMIUM_MONTH)]
    )
    assert all(r.expires_at is not None for r in rewards)
    for account in (referrer, referred):
        sub = db.query(Subscription).filter(Subscription.user_id == account.id).one()
        assert sub.plan_type == PlanType.PREMIUM


def test_provider_referral_completes_automatically(
    db, engine, make_user, make_service, make_booking
):
    referrer = make_user()
    provider = make_user(role=UserRole.PROVIDER, phone=PHONE, is_verified=True)
    provider.provider_profile.is_verified = True
    db.commit()
    service = make_service(provider)
    make_booking(make_user(), service, status=BookingStatus.COMPLETED)

    referral = engine.generate_code(referrer.id)
    applied = engine.apply_code(provider.id, referral.referral_code)
    assert applied.verification_steps == PROVIDER_STEPS

    result = None
    for step in PROVIDER_STEPS:
        result = engine.complete_step(referral.id, provider.id, step, {"phone": PHONE})

    assert result.all_steps_completed is True
    db.refresh(referral)
    assert referral.status == ReferralStatus.COMPLETED
    assert referral.completed_at is not None


def test_provider_referrer_features_own_listings(
    db, engine, sink, make_user, make_service, make_booking
):
    referrer = make_user(role=UserRole.PROVIDER)
    listing = make_service(referrer)
    referred = make_user(phone=PHONE, is_verified=True)
    _complete_customer_checklist(db, referred, make_user, make_service, make_booking)

    referral = engine.generate_code(referrer.id)
    assert referral.reward_type == RewardType.VISIBILITY_BOOST
    engine.apply_code(referred.id, referral.referral_code)
    for step in CUSTOMER_STEPS:
        engine.complete_step(referral.id, referred.id, step, {"phone": PHONE})

    db.refresh(listing)
    assert listing.is_featured is True
    rewards = db.query(ReferralReward).all()
    assert [(r.account_id, r.reward_type) for r in rewards] == [
        (referrer.id, RewardType.VISIBILITY_BOOST)
    ]
    assert [e.message for e in sink.for_account(referrer.id)] == [
        "Your referral was completed. Your reward has been applied."
    ]
    assert [e.message for e in sink.for_account(referred.id)] == [
        "You completed all referral steps."
    ]


def test_step_completion_is_idempotent(db, engine, make_user):
    referrer = make_user()
    referred = make_user(is_verified=True)
    referral = engine.generate_code(referrer.id)
    engine.apply_code(referred.id, referral.referral_code)

    first = engine.complete_step(referral.id, referred.id, ReferralStep.EMAIL_VERIFICATION)
    second = engine.complete_step(referral.id, referred.id, ReferralStep.EMAIL_VERIFICATION)

    assert first.referral.completed_steps == [ReferralStep.EMAIL_VERIFICATION]
    assert second.referral.completed_steps == [ReferralStep.EMAIL_VERIFICATION]
    assert len(second.remaining_steps) == 4


def test_failed_or_foreign_steps_are_rejected(db, engine, make_user):
    referrer = make_user()
    referred = make_user(phone=PHONE)
    referral = engine.generate_code(referrer.id)
    engine.apply_code(referred.id, referral.referral_code)

    with pytest.raises(VerificationFailedError):
        engine.complete_step(referral.id, referred.id, ReferralStep.EMAIL_VERIFICATION)
    with pytest.raises(VerificationFailedError):
        engine.complete_step(referral.id, referred.id, ReferralStep.PHONE_VERIFICATION, {"phone": "+371 1"})
    # Provider-only step is not on a customer's checklist
    with pytest.raises(VerificationFailedError):
        engine.complete_step(referral.id, referred.id, ReferralStep.SERVICE_CREATION)
    with pytest.raises(NotFoundError):
        engine.complete_step(referral.id, referrer.id, ReferralStep.EMAIL_VERIFICATION)

    db.refresh(referral)
    assert referral.completed_steps == []


def test_self_referral_is_rejected_for_any_code_state(db, engine, make_user):
    referrer = make_user()
    referral = engine.generate_code(referrer.id)

    with pytest.raises(SelfReferralError):
        engine.apply_code(referrer.id, referral.referral_code)

    engine.apply_code(make_user().id, referral.referral_code)
    with pytest.raises(SelfReferralError):
        engine.apply_code(referrer.id, referral.referral_code)


def test_used_and_unknown_codes(db, engine, make_user):
    referral = engine.generate_code(make_user().id)
    engine.apply_code(make_user().id, referral.referral_code)

    with pytest.raises(InvalidStateError):
        engine.apply_code(make_user().id, referral.referral_code)
    with pytest.raises(NotFoundError):
        engine.apply_code(make_user().id, "ZZZZ9999")


def test_only_one_referral_completes_per_account(
    db, engine, make_user, make_service, make_booking
):
    referred = make_user(phone=PHONE, is_verified=True)
    _complete_customer_checklist(db, referred, make_user, make_service, make_booking)
    first = engine.generate_code(make_user().id)
    second = engine.generate_code(make_user().id)

    # Two in-flight applications are allowed; only one may complete
    engine.apply_code(referred.id, first.referral_code)
    engine.apply_code(referred.id, second.referral_code)
    db.refresh(second)
    assert second.status == ReferralStatus.PENDING_VERIFICATION
    assert second.referred_id == referred.id

    for step in CUSTOMER_STEPS:
        engine.complete_step(first.id, referred.id, step, {"phone": PHONE})
    db.refresh(first)
    assert first.status == ReferralStatus.COMPLETED

    for step in CUSTOMER_STEPS[:-1]:
        engine.complete_step(second.id, referred.id, step, {"phone": PHONE})
    with pytest.raises(AlreadyUsedError):
        engine.complete_step(second.id, referred.id, CUSTOMER_STEPS[-1])
    db.refresh(second)
    assert second.status == ReferralStatus.PENDING_VERIFICATION
    assert second.completed_at is None

    third = engine.generate_code(make_user().id)
    with pytest.raises(AlreadyUsedError):
        engine.apply_code(referred.id, third.referral_code)
    db.refresh(third)
    assert third.status == ReferralStatus.PENDING
    assert third.referred_id is None


def test_generate_code_reuses_pending_referral(db, engine, make_user):
    referrer = make_user()
    first = engine.generate_code(referrer.id)
    again = engine.generate_code(referrer.id)
    assert again.id == first.id
    assert again.referral_code == first.referral_code

    engine.apply_code(make_user().id, first.referral_code)
    fresh = engine.generate_code(referrer.id)
    assert fresh.id != first.id


def test_generate_code_retries_on_collision(db, engine, make_user, monkeypatch):
    existing_code = engine.generate_code(make_user().id).referral_code
    codes = iter([existing_code, "NEWCODE1"])
    monkeypatch.setattr(referral_codes, "generate_referral_code", lambda length=8: next(codes))

    referral = engine.generate_code(make_user().id)
    assert referral.referral_code == "NEWCODE1"


def test_generate_code_gives_up_after_max_attempts(db, engine, make_user, monkeypatch):
    existing_code = engine.generate_code(make_user().id).referral_code
    monkeypatch.setattr(referral_codes, "generate_referral_code", lambda length=8: existing_code)

    with pytest.raises(InternalError):
        engine.generate_code(make_user().id)


def test_generate_code_handles_insert_race(db, engine, make_user, monkeypatch):
    from app import crud

    calls = {"n": 0}
    original = crud.referral.create_referral

    def flaky_create(session, referrer_id, code, reward_type):
        calls["n"] += 1
        if calls["n"] == 1:
            raise IntegrityError("INSERT", {}, Exception("duplicate"))
        return original(session, referrer_id, code, reward_type)

    monkeypatch.setattr(crud.referral, "create_referral", flaky_create)
    referral = engine.generate_code(make_user().id)
    assert calls["n"] == 2
    assert referral.id is not None


def test_status_reports_both_sides(db, engine, make_user):
    referrer = make_user()
    referred = make_user()
    referral = engine.generate_code(referrer.id)
    engine.apply_code(referred.id, referral.referral_code)
    engine.generate_code(referrer.id)

    report = engine.status(referrer.id)
    assert report.stats == {
        "total_referrals": 2,
        "completed_referrals": 0,
        "pending_referrals": 1,
    }
    assert [r.id for r in engine.status(referred.id).referrals] == [referral.id]
