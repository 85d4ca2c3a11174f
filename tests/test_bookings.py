def test_book_accepted_quote(client, client_auth, accepted_quote):
    response = client.post(
        "/api/bookings/",
        json={"quote_id": accepted_quote["id"], "scheduled_date": "2026-11-03T09:00"},
        headers=client_auth,
    )
    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "scheduled"
    assert data["request_status"] == "in_progress"
    assert data["cost"] == accepted_quote["cost"]
    assert data["mechanic_name"] == "Bob Wrench"
    assert data["client_name"] == "Alice Owner"

    request = client.get(f"/api/requests/{accepted_quote['request_id']}", headers=client_auth).json()
    assert request["status"] == "in_progress"


def test_cannot_book_pending_quote(client, client_auth, quote):
    response = client.post(
        "/api/bookings/",
        json={"quote_id": quote["id"], "scheduled_date": "2026-11-03T09:00"},
        headers=client_auth,
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Can only book accepted quotes"


def test_cannot_book_twice(client, client_auth, booking):
    response = client.post(
        "/api/bookings/",
        json={"quote_id": booking["quote_id"], "scheduled_date": "2026-11-04T09:00"},
        headers=client_auth,
    )
    assert response.status_code == 400


def test_only_request_owner_books(client, register, mechanic_auth, accepted_quote):
    other, _ = register("client")
    payload = {"quote_id": accepted_quote["id"], "scheduled_date": "2026-11-03T09:00"}

    assert client.post("/api/bookings/", json=payload, headers=other).status_code == 403
    assert client.post("/api/bookings/", json=payload, headers=mechanic_auth).status_code == 403


def test_list_bookings(client, client_auth, mechanic_auth, register, booking):
    assert client.get("/api/bookings/", headers=client_auth).json()["total"] == 1
    assert client.get("/api/bookings/my-bookings", headers=mechanic_auth).json()["total"] == 1

    stranger, _ = register("mechanic")
    assert client.get("/api/bookings/", headers=stranger).json()["total"] == 0
    assert client.get(f"/api/bookings/{booking['id']}", headers=stranger).status_code == 403


def test_mechanic_starts_booking(client, client_auth, mechanic_auth, booking):
    url = f"/api/bookings/{booking['id']}/status"

    assert client.put(url, json={"status": "in_progress"}, headers=client_auth).status_code == 403

    response = client.put(url, json={"status": "in_progress"}, headers=mechanic_auth)
    assert response.status_code == 200
    assert response.json()["status"] == "in_progress"
    assert response.json()["request_status"] == "in_progress"


def test_complete_booking(client, mechanic_auth, booking):
    response = client.post(f"/api/bookings/{booking['id']}/complete", headers=mechanic_auth)
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "completed"
    assert data["completed_at"] is not None
    assert data["request_status"] == "completed"


def test_client_cannot_complete_booking(client, client_auth, booking):
    response = client.post(f"/api/bookings/{booking['id']}/complete", headers=client_auth)
    assert response.status_code == 403
    assert response.json()["detail"] == "Only mechanics can mark bookings as completed"

    response = client.put(f"/api/bookings/{booking['id']}", json={"status": "completed"}, headers=client_auth)
    assert response.status_code == 403


def test_client_cancels_booking(client, client_auth, booking):
    response = client.put(f"/api/bookings/{booking['id']}/status", json={"status": "cancelled"}, headers=client_auth)
    assert response.status_code == 200
    assert response.json()["status"] == "cancelled"
    assert response.json()["request_status"] == "open"


def test_mechanic_cannot_cancel_booking(client, mechanic_auth, booking):
    response = client.put(f"/api/bookings/{booking['id']}/status", json={"status": "cancelled"}, headers=mechanic_auth)
    assert response.status_code == 403
    assert response.json()["detail"] == "Only clients can cancel bookings"


def test_cancelled_booking_reopens_request_for_quotes(client, client_auth, register, booking, make_quote):
    client.put(f"/api/bookings/{booking['id']}/status", json={"status": "cancelled"}, headers=client_auth)

    # The cancelled booking still holds its quote
    again = client.post(
        "/api/bookings/",
        json={"quote_id": booking["quote_id"], "scheduled_date": "2026-11-04T09:00"},
        headers=client_auth,
    )
    assert again.status_code == 400
    assert again.json()["detail"] == "This quote already has a booking"

    other, _ = register("mechanic")
    fresh = make_quote(other, booking["request_id"], cost=95)
    client.put(f"/api/quotes/{fresh['id']}/accept", headers=client_auth)
    rebooked = client.post(
        "/api/bookings/",
        json={"quote_id": fresh["id"], "scheduled_date": "2026-11-05T09:00"},
        headers=client_auth,
    )
    assert rebooked.status_code == 201
    assert rebooked.json()["request_status"] == "in_progress"


def test_completed_booking_is_final(client, client_auth, completed_booking):
    url = f"/api/bookings/{completed_booking['id']}"

    cancel = client.put(f"{url}/status", json={"status": "cancelled"}, headers=client_auth)
    assert cancel.status_code == 400

    edit = client.put(url, json={"notes": "too late"}, headers=client_auth)
    assert edit.status_code == 400


def test_reschedule_booking(client, client_auth, booking):
    response = client.put(
        f"/api/bookings/{booking['id']}",
        json={"scheduled_date": "2026-11-10T14:00", "notes": "Afternoon works better"},
        headers=client_auth,
    )
    assert response.status_code == 200
    assert response.json()["scheduled_date"] == "2026-11-10T14:00"
    assert response.json()["status"] == "scheduled"


def test_delete_scheduled_booking(client, client_auth, booking):
    response = client.delete(f"/api/bookings/{booking['id']}", headers=client_auth)
    assert response.status_code == 200

    request = client.get(f"/api/requests/{booking['request_id']}", headers=client_auth).json()
    assert request["status"] == "open"

    # The accepted quote can be booked again
    rebooked = client.post(
        "/api/bookings/",
        json={"quote_id": booking["quote_id"], "scheduled_date": "2026-11-06T09:00"},
        headers=client_auth,
    )
    assert rebooked.status_code == 201


def test_cannot_delete_started_booking(client, client_auth, mechanic_auth, booking):
    client.put(f"/api/bookings/{booking['id']}/status", json={"status": "in_progress"}, headers=mechanic_auth)

    response = client.delete(f"/api/bookings/{booking['id']}", headers=client_auth)
    assert response.status_code == 400
    assert response.json()["detail"] == "Can only delete scheduled bookings"
