from decimal import Decimal

from app.models import Booking, BookingStatus, UserRole


def test_public_listing_filters_and_featured_first(client, make_user, make_service):
    provider = make_user(role=UserRole.PROVIDER)
    cheap = make_service(provider, title="Logu mazgāšana", price=Decimal("20.00"))
    pricey = make_service(provider, title="General cleaning", price=Decimal("90.00"), is_featured=True)
    make_service(provider, title="Hidden listing", is_active=False)

    res = client.get("/api/v1/services")
    body = res.json()
    assert res.status_code == 200
    assert body["pagination"]["total"] == 2
    assert [s["id"] for s in body["data"]] == [pricey.id, cheap.id]

    res = client.get("/api/v1/services?maxPrice=50")
    assert [s["id"] for s in res.json()["data"]] == [cheap.id]

    res = client.get("/api/v1/services?search=GENERAL")
    assert [s["id"] for s in res.json()["data"]] == [pricey.id]

    res = client.get("/api/v1/services?category=cleaning&limit=1")
    assert res.json()["pagination"] == {"page": 1, "limit": 1, "total": 2, "pages": 2}

    res = client.get("/api/v1/services?category=unknown")
    assert res.status_code == 404


def test_categories_endpoint(client, category):
    res = client.get("/api/v1/services/categories")
    assert res.status_code == 200
    assert res.json()["data"] == [
        {"id": category.id, "slug": "cleaning", "nameLv": "Uzkopšana", "nameRu": "Уборка", "nameEn": "Cleaning"}
    ]


def test_provider_creates_service(client, make_user, category, auth_headers):
    provider = make_user(role=UserRole.PROVIDER)
    payload = {
        "title": "Santehniķa izsaukums",
        "description": "Leak repair and pipe checks",
        "price": "35.00",
        "priceType": "hourly",
        "categorySlug": "cleaning",
        "durationMinutes": 60,
    }

    res = client.post("/api/v1/services", json=payload, headers=auth_headers(provider))
    assert res.status_code == 201
    data = res.json()["data"]
    assert data["providerId"] == provider.id
    assert data["categoryId"] == category.id
    assert data["currency"] == "EUR"
    assert data["priceType"] == "hourly"
    assert data["isFeatured"] is False

    res = client.post("/api/v1/services", json=payload, headers=auth_headers(make_user()))
    assert res.status_code == 403


def test_create_service_needs_category(client, make_user, auth_headers):
    res = client.post(
        "/api/v1/services",
        json={"title": "No category", "description": "Missing category field", "price": 10},
        headers=auth_headers(make_user(role=UserRole.PROVIDER)),
    )
    assert res.status_code == 400
    assert res.json()["success"] is False


def test_only_owner_updates_or_deletes(
    client, db, make_user, make_service, make_booking, auth_headers
):
    owner = make_user(role=UserRole.PROVIDER)
    service = make_service(owner)
    booking = make_booking(make_user(), service, status=BookingStatus.COMPLETED)
    intruder = make_user(role=UserRole.PROVIDER)

    res = client.put(f"/api/v1/services/{service.id}", json={"price": 50}, headers=auth_headers(intruder))
    assert res.status_code == 403

    res = client.put(
        f"/api/v1/services/{service.id}",
        json={"price": 50, "isAvailable": False},
        headers=auth_headers(owner),
    )
    assert res.status_code == 200
    assert float(res.json()["data"]["price"]) == 50.0
    assert res.json()["data"]["isAvailable"] is False

    assert client.delete(f"/api/v1/services/{service.id}", headers=auth_headers(intruder)).status_code == 403
    res = client.delete(f"/api/v1/services/{service.id}", headers=auth_headers(owner))
    assert res.status_code == 200
    assert client.get(f"/api/v1/services/{service.id}").status_code == 404

    # Bookings outlive the listing
    db.expire_all()
    kept = db.get(Booking, booking.id)
    assert kept is not None
    assert kept.service_id is None
