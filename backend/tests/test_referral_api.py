from app.models import BookingStatus, Notification, Review, UserRole
from app.utils import referral_codes

PHONE = "+37129999999"


def test_generate_is_idempotent(client, make_user, auth_headers):
    referrer = make_user()
    headers = auth_headers(referrer)

    first = client.post("/api/v1/referrals/generate", headers=headers)
    second = client.post("/api/v1/referrals/generate", headers=headers)

    assert first.status_code == 200
    code = first.json()["data"]["referralCode"]
    assert len(code) == 8
    assert code.isalnum() and code.upper() == code
    assert second.json()["data"] == {"referralCode": code, "status": "pending"}


def test_apply_and_verify_flow(
    client, db, make_user, make_service, make_booking, auth_headers, monkeypatch
):
    monkeypatch.setattr(referral_codes, "generate_referral_code", lambda length=8: "ABCD1234")
    referrer = make_user()
    referred = make_user(phone=PHONE, is_verified=True)
    provider = make_user(role=UserRole.PROVIDER)
    service = make_service(provider)
    booking = make_booking(referred, service, status=BookingStatus.COMPLETED)
    db.add(
        Review(
            booking_id=booking.id,
            customer_id=referred.id,
            provider_id=provider.id,
            service_id=service.id,
            rating=4,
        )
    )
    db.commit()

    client.post("/api/v1/referrals/generate", headers=auth_headers(referrer))
    res = client.post(
        "/api/v1/referrals/apply",
        json={"referralCode": "ABCD1234"},
        headers=auth_headers(referred),
    )
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["verificationSteps"] == [
        "email_verification",
        "phone_verification",
        "profile_completion",
        "first_booking",
        "review_submission",
    ]
    referral_id = data["referralId"]

    last = None
    for step in data["verificationSteps"]:
        last = client.post(
            "/api/v1/referrals/verify-step",
            json={"referralId": referral_id, "stepType": step, "stepData": {"phone": PHONE}},
            headers=auth_headers(referred),
        )
        assert last.status_code == 200

    result = last.json()["data"]
    assert result["allStepsCompleted"] is True
    assert result["remainingSteps"] == []
    assert result["referral"]["status"] == "completed"
    assert result["referral"]["completedAt"] is not None

    status = client.get("/api/v1/referrals/status", headers=auth_headers(referrer)).json()["data"]
    assert status["stats"] == {
        "totalReferrals": 1,
        "completedReferrals": 1,
        "pendingReferrals": 0,
    }
    titles = [
        n.title
        for n in db.query(Notification).filter(Notification.user_id == referrer.id).all()
    ]
    assert titles == ["Referral Completed"]


def test_partial_progress_reports_remaining_steps(client, make_user, auth_headers):
    referrer = make_user()
    referred = make_user(is_verified=True)
    code = client.post("/api/v1/referrals/generate", headers=auth_headers(referrer)).json()["data"]["referralCode"]
    referral_id = client.post(
        "/api/v1/referrals/apply", json={"referralCode": code}, headers=auth_headers(referred)
    ).json()["data"]["referralId"]

    res = client.post(
        "/api/v1/referrals/verify-step",
        json={"referralId": referral_id, "stepType": "email_verification"},
        headers=auth_headers(referred),
    )
    data = res.json()["data"]
    assert data["allStepsCompleted"] is False
    assert data["remainingSteps"] == [
        "phone_verification",
        "profile_completion",
        "first_booking",
        "review_submission",
    ]
    assert data["referral"]["completedSteps"] == ["email_verification"]


def test_apply_errors_use_envelope(client, make_user, auth_headers):
    referrer = make_user()
    code = client.post("/api/v1/referrals/generate", headers=auth_headers(referrer)).json()["data"]["referralCode"]

    res = client.post(
        "/api/v1/referrals/apply", json={"referralCode": code}, headers=auth_headers(referrer)
    )
    assert res.status_code == 400
    assert res.json() == {"success": False, "message": "Cannot refer yourself"}

    res = client.post(
        "/api/v1/referrals/apply", json={"referralCode": "NOPE0000"}, headers=auth_headers(referrer)
    )
    assert res.status_code == 404
    assert res.json()["message"] == "Invalid referral code"

    res = client.post(
        "/api/v1/referrals/apply", json={"referralCode": "SHORT"}, headers=auth_headers(referrer)
    )
    assert res.status_code == 400
    assert res.json()["message"] == "Validation failed"


def test_verify_step_for_unknown_referral(client, make_user, auth_headers):
    res = client.post(
        "/api/v1/referrals/verify-step",
        json={"referralId": 77, "stepType": "email_verification"},
        headers=auth_headers(make_user()),
    )
    assert res.status_code == 404
    assert res.json()["message"] == "Referral not found or already completed"
