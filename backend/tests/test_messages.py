from app.models import BookingStatus, Message, Notification, NotificationType, UserRole


def _send(client, headers, receiver_id, content, **extra):
    payload = {"receiverId": receiver_id, "content": content}
    payload.update(extra)
    return client.post("/api/v1/messages", json=payload, headers=headers)


def test_send_message_notifies_receiver(client, db, make_user, auth_headers):
    sender = make_user()
    receiver = make_user()

    res = _send(client, auth_headers(sender), receiver.id, "  Sveiki! Vai rīt der?  ")
    assert res.status_code == 201
    body = res.json()
    assert body["message"] == "Message sent successfully"
    data = body["data"]
    assert data["senderId"] == sender.id
    assert data["receiverId"] == receiver.id
    assert data["content"] == "Sveiki! Vai rīt der?"
    assert data["messageType"] == "text"
    assert data["attachments"] == []
    assert data["isRead"] is False
    assert data["sender"]["firstName"] == sender.first_name

    notes = db.query(Notification).filter(Notification.user_id == receiver.id).all()
    assert [(n.type, n.title, n.message) for n in notes] == [
        (NotificationType.NEW_MESSAGE, f"New message from {sender.full_name}", "Sveiki! Vai rīt der?")
    ]
    assert db.query(Notification).filter(Notification.user_id == sender.id).count() == 0


def test_send_message_rejections(client, make_user, make_service, make_booking, auth_headers):
    sender = make_user()
    headers = auth_headers(sender)
    provider = make_user(role=UserRole.PROVIDER)
    foreign_booking = make_booking(make_user(), make_service(provider))

    res = _send(client, headers, sender.id, "hello me")
    assert res.status_code == 400
    assert res.json()["message"] == "You cannot send a message to yourself"

    res = _send(client, headers, 424242, "hello?")
    assert res.status_code == 404
    assert res.json()["message"] == "Receiver not found"

    res = _send(client, headers, provider.id, "about that job", bookingId=foreign_booking.id)
    assert res.status_code == 403
    assert res.json()["message"] == "Access denied to this booking"

    res = _send(client, headers, provider.id, "about that job", bookingId=424242)
    assert res.status_code == 404

    res = _send(client, headers, provider.id, "   ")
    assert res.status_code == 400
    assert res.json()["errors"][0]["field"] == "content"

    res = _send(client, headers, provider.id, "x" * 1001)
    assert res.status_code == 400

    res = _send(client, headers, provider.id, "hi", messageType="VIDEO")
    assert res.status_code == 400

    assert client.post("/api/v1/messages", json={"receiverId": provider.id, "content": "hi"}).status_code == 401


def test_booking_message_between_parties(client, make_user, make_service, make_booking, auth_headers):
    provider = make_user(role=UserRole.PROVIDER)
    customer = make_user()
    booking = make_booking(customer, make_service(provider), status=BookingStatus.CONFIRMED)

    res = _send(
        client,
        auth_headers(customer),
        provider.id,
        "Photo of the sink",
        bookingId=booking.id,
        messageType="IMAGE",
        attachments=["https://cdn.example.lv/sink.jpg"],
    )
    assert res.status_code == 201
    data = res.json()["data"]
    assert data["bookingId"] == booking.id
    assert data["messageType"] == "image"
    assert data["attachments"] == ["https://cdn.example.lv/sink.jpg"]


def test_conversation_pages_from_newest(client, make_user, auth_headers):
    alice = make_user()
    bob = make_user()
    for i, (author, target) in enumerate([(alice, bob), (bob, alice), (alice, bob)], start=1):
        assert _send(client, auth_headers(author), target.id, f"message {i}").status_code == 201
    # Unrelated thread is not part of the conversation
    _send(client, auth_headers(alice), make_user().id, "elsewhere")

    res = client.get(
        "/api/v1/messages/conversation",
        params={"otherUserId": bob.id, "limit": 2},
        headers=auth_headers(alice),
    )
    assert res.status_code == 200
    body = res.json()
    assert [m["content"] for m in body["data"]] == ["message 2", "message 3"]
    assert body["pagination"] == {"page": 1, "limit": 2, "total": 3, "pages": 2}

    res = client.get(
        "/api/v1/messages/conversation",
        params={"otherUserId": bob.id, "limit": 2, "page": 2},
        headers=auth_headers(bob),
    )
    assert [m["content"] for m in res.json()["data"]] == ["message 1"]

    res = client.get("/api/v1/messages/conversation", headers=auth_headers(alice))
    assert res.status_code == 400


def test_conversation_booking_filter(client, make_user, make_service, make_booking, auth_headers):
    provider = make_user(role=UserRole.PROVIDER)
    customer = make_user()
    booking = make_booking(customer, make_service(provider))
    _send(client, auth_headers(customer), provider.id, "general question")
    _send(client, auth_headers(customer), provider.id, "about the booking", bookingId=booking.id)

    res = client.get(
        "/api/v1/messages/conversation",
        params={"otherUserId": customer.id, "bookingId": booking.id},
        headers=auth_headers(provider),
    )
    assert [m["content"] for m in res.json()["data"]] == ["about the booking"]


def test_conversations_group_by_counterparty(client, make_user, auth_headers):
    me = make_user()
    bob = make_user()
    carol = make_user()
    _send(client, auth_headers(bob), me.id, "from bob 1")
    _send(client, auth_headers(bob), me.id, "from bob 2")
    _send(client, auth_headers(me), carol.id, "to carol")
    _send(client, auth_headers(me), bob.id, "reply to bob")

    res = client.get("/api/v1/messages/conversations", headers=auth_headers(me))
    assert res.status_code == 200
    conversations = res.json()["data"]
    assert [c["otherUser"]["id"] for c in conversations] == [bob.id, carol.id]
    assert conversations[0]["lastMessage"]["content"] == "reply to bob"
    assert conversations[0]["unreadCount"] == 2
    assert conversations[1]["lastMessage"]["content"] == "to carol"
    assert conversations[1]["unreadCount"] == 0

    res = client.get("/api/v1/messages/conversations", headers=auth_headers(carol))
    assert [(c["otherUser"]["id"], c["unreadCount"]) for c in res.json()["data"]] == [(me.id, 1)]


def test_mark_read_only_touches_own_inbox(client, db, make_user, auth_headers):
    sender = make_user()
    receiver = make_user()
    first = _send(client, auth_headers(sender), receiver.id, "one").json()["data"]["id"]
    second = _send(client, auth_headers(sender), receiver.id, "two").json()["data"]["id"]

    res = client.put(
        "/api/v1/messages/read", json={"messageIds": [first, second]}, headers=auth_headers(sender)
    )
    assert res.status_code == 200
    assert res.json()["data"] == {"updated": 0}

    res = client.put(
        "/api/v1/messages/read", json={"messageIds": [first]}, headers=auth_headers(receiver)
    )
    assert res.json()["message"] == "Messages marked as read"
    assert res.json()["data"] == {"updated": 1}

    res = client.put(
        "/api/v1/messages/read", json={"messageIds": [first, second]}, headers=auth_headers(receiver)
    )
    assert res.json()["data"] == {"updated": 1}

    db.expire_all()
    rows = db.query(Message).order_by(Message.id).all()
    assert [(m.is_read, m.read_at is not None) for m in rows] == [(True, True), (True, True)]

    res = client.put("/api/v1/messages/read", json={"messageIds": "all"}, headers=auth_headers(receiver))
    assert res.status_code == 400


def test_only_sender_deletes_message(client, db, make_user, auth_headers):
    sender = make_user()
    receiver = make_user()
    message_id = _send(client, auth_headers(sender), receiver.id, "oops").json()["data"]["id"]

    res = client.delete(f"/api/v1/messages/{message_id}", headers=auth_headers(receiver))
    assert res.status_code == 403
    assert res.json()["message"] == "You can only delete your own messages"

    res = client.delete(f"/api/v1/messages/{message_id}", headers=auth_headers(sender))
    assert res.status_code == 200
    assert res.json()["message"] == "Message deleted successfully"
    assert db.query(Message).count() == 0

    res = client.delete(f"/api/v1/messages/{message_id}", headers=auth_headers(sender))
    assert res.status_code == 404
