from app.models import BookingStatus, Notification, UserRole


def _booking_payload(service_id, **overrides):
    payload = {
        "serviceId": service_id,
        "scheduledDate": "2030-03-15",
        "scheduledTime": "14:00",
        "address": "Elizabetes iela 5",
        "city": "Riga",
    }
    payload.update(overrides)
    return payload


def test_create_booking_returns_envelope(client, db, make_user, make_service, auth_headers):
    provider = make_user(role=UserRole.PROVIDER)
    customer = make_user()
    service = make_service(provider)

    res = client.post(
        "/api/v1/bookings", json=_booking_payload(service.id), headers=auth_headers(customer)
    )

    assert res.status_code == 201
    body = res.json()
    assert body["success"] is True
    assert body["message"] == "Booking created successfully"
    data = body["data"]
    assert data["status"] == "pending"
    assert data["providerId"] == provider.id
    assert data["customerId"] == customer.id
    assert float(data["totalAmount"]) == 45.0
    assert data["scheduledTime"] == "14:00"
    assert data["service"]["id"] == service.id

    notes = db.query(Notification).filter(Notification.user_id == provider.id).all()
    assert len(notes) == 1
    assert notes[0].title == "New Booking"


def test_create_booking_requires_auth(client, make_user, make_service):
    service = make_service(make_user(role=UserRole.PROVIDER))
    res = client.post("/api/v1/bookings", json=_booking_payload(service.id))
    assert res.status_code == 401
    assert res.json()["success"] is False


def test_create_booking_validates_time(client, make_user, make_service, auth_headers):
    service = make_service(make_user(role=UserRole.PROVIDER))
    res = client.post(
        "/api/v1/bookings",
        json=_booking_payload(service.id, scheduledTime="25:99"),
        headers=auth_headers(make_user()),
    )
    assert res.status_code == 400
    body = res.json()
    assert body["success"] is False
    assert body["message"] == "Validation failed"
    assert any(err["field"] == "scheduledTime" for err in body["errors"])


def test_create_booking_for_unknown_service(client, make_user, auth_headers):
    res = client.post(
        "/api/v1/bookings", json=_booking_payload(555), headers=auth_headers(make_user())
    )
    assert res.status_code == 404
    assert res.json() == {"success": False, "message": "Service not found"}


def test_lists_paginate(client, make_user, make_service, make_booking, auth_headers):
    provider = make_user(role=UserRole.PROVIDER)
    customer = make_user()
    service = make_service(provider)
    for _ in range(3):
        make_booking(customer, service)

    res = client.get("/api/v1/bookings/user?page=2&limit=2", headers=auth_headers(customer))
    assert res.status_code == 200
    body = res.json()
    assert len(body["data"]) == 1
    assert body["pagination"] == {"page": 2, "limit": 2, "total": 3, "pages": 2}

    res = client.get("/api/v1/bookings/provider", headers=auth_headers(provider))
    assert res.json()["pagination"]["total"] == 3

    # Customers have no provider dashboard
    res = client.get("/api/v1/bookings/provider", headers=auth_headers(customer))
    assert res.status_code == 403


def test_status_filter(client, make_user, make_service, make_booking, auth_headers):
    provider = make_user(role=UserRole.PROVIDER)
    customer = make_user()
    service = make_service(provider)
    make_booking(customer, service)
    confirmed = make_booking(customer, service, status=BookingStatus.CONFIRMED)

    res = client.get("/api/v1/bookings/user?status=confirmed", headers=auth_headers(customer))
    assert [b["id"] for b in res.json()["data"]] == [confirmed.id]


def test_cancel_then_confirm(client, make_user, make_service, make_booking, auth_headers):
    provider = make_user(role=UserRole.PROVIDER)
    customer = make_user()
    booking = make_booking(customer, make_service(provider))

    res = client.put(
        f"/api/v1/bookings/user/{booking.id}/cancel",
        json={"cancellationReason": "Sick"},
        headers=auth_headers(customer),
    )
    assert res.status_code == 200
    assert res.json()["data"]["status"] == "cancelled"
    assert res.json()["data"]["cancellationReason"] == "Sick"

    res = client.put(
        f"/api/v1/bookings/provider/{booking.id}/status",
        json={"status": "confirmed"},
        headers=auth_headers(provider),
    )
    assert res.status_code == 400
    assert res.json()["success"] is False


def test_cancellation_reason_is_stored(db, client, make_user, make_service, make_booking, auth_headers):
    customer = make_user()
    booking = make_booking(customer, make_service(make_user(role=UserRole.PROVIDER)))

    res = client.put(
        f"/api/v1/bookings/user/{booking.id}/cancel",
        json={"cancellationReason": "sick"},
        headers=auth_headers(customer),
    )
    assert res.status_code == 200
    assert res.json()["data"]["cancellationReason"] == "sick"

    db.refresh(booking)
    assert booking.status == BookingStatus.CANCELLED
    assert booking.cancellation_reason == "sick"
    assert booking.cancelled_at is not None


def test_cancel_without_body(client, make_user, make_service, make_booking, auth_headers):
    customer = make_user()
    booking = make_booking(customer, make_service(make_user(role=UserRole.PROVIDER)))

    res = client.put(f"/api/v1/bookings/user/{booking.id}/cancel", headers=auth_headers(customer))
    assert res.status_code == 200
    assert res.json()["data"]["cancellationReason"] is None


def test_provider_status_update(client, make_user, make_service, make_booking, auth_headers):
    provider = make_user(role=UserRole.PROVIDER)
    customer = make_user()
    booking = make_booking(customer, make_service(provider))

    res = client.put(
        f"/api/v1/bookings/provider/{booking.id}/status",
        json={"status": "CONFIRMED"},
        headers=auth_headers(provider),
    )
    assert res.status_code == 200
    assert res.json()["data"]["status"] == "confirmed"

    res = client.put(
        f"/api/v1/bookings/provider/{booking.id}/status",
        json={"status": "in_progress"},
        headers=auth_headers(customer),
    )
    assert res.status_code == 403
    assert res.json()["message"] == "Only the service provider can update booking status"


def test_read_single_booking_scoped(client, make_user, make_service, make_booking, auth_headers):
    provider = make_user(role=UserRole.PROVIDER)
    customer = make_user()
    booking = make_booking(customer, make_service(provider))

    assert client.get(f"/api/v1/bookings/user/{booking.id}", headers=auth_headers(customer)).status_code == 200
    assert client.get(f"/api/v1/bookings/provider/{booking.id}", headers=auth_headers(provider)).status_code == 200
    res = client.get(f"/api/v1/bookings/user/{booking.id}", headers=auth_headers(make_user()))
    assert res.status_code == 403
    assert res.json() == {"success": False, "message": "Access denied"}
