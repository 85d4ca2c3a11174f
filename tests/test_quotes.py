def test_create_quote(client, mechanic_auth, service_request):
    response = client.post(
        "/api/quotes/",
        json={
            "request_id": service_request["id"],
            "cost": 100,
            "time_required": "2 hours",
            "parts_needed": "Brake pads",
            "availability": "Tomorrow",
        },
        headers=mechanic_auth,
    )
    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "pending"
    assert data["cost"] == 100
    assert data["mechanic_name"] == "Bob Wrench"
    assert data["client_name"] == "Alice Owner"
    assert data["request_status"] == "open"
    assert data["has_booking"] is False


def test_second_quote_by_same_mechanic(client, mechanic_auth, quote):
    response = client.post(
        "/api/quotes/",
        json={"request_id": quote["request_id"], "cost": 80, "time_required": "1 hour", "availability": "Friday"},
        headers=mechanic_auth,
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "You have already quoted this request"


def test_two_mechanics_can_quote(client, register, quote, make_quote):
    other, _ = register("mechanic")
    second = make_quote(other, quote["request_id"], cost=90)
    assert second["mechanic_id"] != quote["mechanic_id"]


def test_client_cannot_quote(client, client_auth, service_request):
    response = client.post(
        "/api/quotes/",
        json={"request_id": service_request["id"], "cost": 50, "time_required": "1 hour", "availability": "Now"},
        headers=client_auth,
    )
    assert response.status_code == 403


def test_quote_needs_positive_cost(client, mechanic_auth, service_request):
    response = client.post(
        "/api/quotes/",
        json={"request_id": service_request["id"], "cost": 0, "time_required": "1 hour", "availability": "Now"},
        headers=mechanic_auth,
    )
    assert response.status_code == 400


def test_quote_missing_request(client, mechanic_auth):
    response = client.post(
        "/api/quotes/",
        json={"request_id": 999, "cost": 50, "time_required": "1 hour", "availability": "Now"},
        headers=mechanic_auth,
    )
    assert response.status_code == 404


def test_cannot_quote_cancelled_request(client, register, mechanic_auth, quote):
    client.put(f"/api/requests/{quote['request_id']}/status", json={"status": "cancelled"}, headers=mechanic_auth)
    other, _ = register("mechanic")

    response = client.post(
        "/api/quotes/",
        json={"request_id": quote["request_id"], "cost": 50, "time_required": "1 hour", "availability": "Now"},
        headers=other,
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Service request is not open for quotes"


def test_listing_quotes(client, client_auth, mechanic_auth, register, quote):
    for_client = client.get(f"/api/quotes/?request_id={quote['request_id']}", headers=client_auth).json()
    assert for_client["total"] == 1

    by_request = client.get(f"/api/quotes/request/{quote['request_id']}", headers=client_auth).json()
    assert [q["id"] for q in by_request["items"]] == [quote["id"]]

    mine = client.get("/api/quotes/my-quotes", headers=mechanic_auth).json()
    assert mine["total"] == 1

    stranger, _ = register("client")
    assert client.get("/api/quotes/", headers=stranger).json()["total"] == 0


def test_quote_visibility(client, client_auth, register, quote):
    assert client.get(f"/api/quotes/{quote['id']}", headers=client_auth).status_code == 200

    other_mechanic, _ = register("mechanic")
    assert client.get(f"/api/quotes/{quote['id']}", headers=other_mechanic).status_code == 403
    assert client.get("/api/quotes/999", headers=client_auth).status_code == 404


def test_accept_quote(client, client_auth, quote):
    response = client.put(f"/api/quotes/{quote['id']}/accept", headers=client_auth)
    assert response.status_code == 200
    assert response.json()["status"] == "accepted"

    # The answer is final
    again = client.put(f"/api/quotes/{quote['id']}/reject", headers=client_auth)
    assert again.status_code == 400
    assert again.json()["detail"] == "Cannot change quote status from 'accepted' to 'rejected'"


def test_accept_via_status_field(client, client_auth, quote):
    response = client.put(f"/api/quotes/{quote['id']}", json={"status": "accepted"}, headers=client_auth)
    assert response.status_code == 200
    assert response.json()["status"] == "accepted"


def test_reject_quote(client, client_auth, quote):
    response = client.put(f"/api/quotes/{quote['id']}/reject", headers=client_auth)
    assert response.status_code == 200
    assert response.json()["status"] == "rejected"


def test_only_request_owner_responds(client, register, mechanic_auth, quote):
    other, _ = register("client")
    assert client.put(f"/api/quotes/{quote['id']}/accept", headers=other).status_code == 403
    assert client.put(f"/api/quotes/{quote['id']}/accept", headers=mechanic_auth).status_code == 403


def test_client_cannot_edit_quote_details(client, client_auth, quote):
    response = client.put(f"/api/quotes/{quote['id']}", json={"cost": 10}, headers=client_auth)
    assert response.status_code == 403


def test_mechanic_edits_pending_quote(client, mechanic_auth, quote):
    response = client.put(f"/api/quotes/{quote['id']}", json={"cost": 120}, headers=mechanic_auth)
    assert response.status_code == 200
    assert response.json()["cost"] == 120


def test_mechanic_cannot_accept_own_quote(client, mechanic_auth, quote):
    response = client.put(f"/api/quotes/{quote['id']}", json={"status": "accepted"}, headers=mechanic_auth)
    assert response.status_code == 403


def test_mechanic_cannot_edit_answered_quote(client, mechanic_auth, accepted_quote):
    response = client.put(f"/api/quotes/{accepted_quote['id']}", json={"cost": 120}, headers=mechanic_auth)
    assert response.status_code == 400


def test_withdraw_quote(client, mechanic_auth, client_auth, quote):
    response = client.delete(f"/api/quotes/{quote['id']}", headers=mechanic_auth)
    assert response.status_code == 200
    assert client.get(f"/api/quotes/{quote['id']}", headers=client_auth).status_code == 404


def test_cannot_withdraw_accepted_quote(client, mechanic_auth, accepted_quote):
    response = client.delete(f"/api/quotes/{accepted_quote['id']}", headers=mechanic_auth)
    assert response.status_code == 400
