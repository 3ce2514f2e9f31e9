from fastapi import status

from app.utils import error_response
from app.utils.errors import InternalError, NotFoundError, SelfReferralError


def test_error_response_structure():
    exc = error_response("Invalid data", {"field": "required"}, status.HTTP_400_BAD_REQUEST)
    assert exc.status_code == status.HTTP_400_BAD_REQUEST
    assert exc.detail == {"message": "Invalid data", "field_errors": {"field": "required"}}


def test_domain_errors_carry_status_and_default_message():
    assert NotFoundError().status_code == 404
    assert SelfReferralError().message == "Cannot refer yourself"
    assert SelfReferralError().status_code == 400
    assert InternalError("boom").status_code == 500
    assert NotFoundError("Booking not found", status_code=410).status_code == 410


def test_unknown_route_uses_envelope(client):
    res = client.get("/api/v1/does-not-exist")
    assert res.status_code == 404
    assert res.json() == {"success": False, "message": "Not Found"}


def test_query_validation_is_400(client, make_user, auth_headers):
    res = client.get("/api/v1/bookings/user?page=0", headers=auth_headers(make_user()))
    assert res.status_code == 400
    body = res.json()
    assert body["success"] is False
    assert body["errors"][0]["field"] == "page"


def test_health(client):
    res = client.get("/")
    assert res.status_code == 200
    assert res.json()["success"] is True
