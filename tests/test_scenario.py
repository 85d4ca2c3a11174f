def test_request_to_review(client, register):
    client_auth, _ = register("client", name="Alice Owner")
    mechanic_auth, _ = register("mechanic", name="Bob Wrench")

    vehicle = client.post(
        "/api/vehicles/",
        json={"make": "Mazda", "model": "Demio", "year": 2015, "license_plate": "KCX 555Z", "vin": "JM1DE1HZ0F0123456"},
        headers=client_auth,
    ).json()

    request = client.post(
        "/api/requests/",
        json={
            "vehicle_id": vehicle["id"],
            "service_type": "Engine diagnostics",
            "description": "Check engine light is on",
            "location": "Kilimani",
            "urgency": "medium",
            "preferred_date": "2026-11-08",
        },
        headers=client_auth,
    ).json()
    assert request["status"] == "open"

    quote = client.post(
        "/api/quotes/",
        json={"request_id": request["id"], "cost": 100, "time_required": "3 hours", "availability": "Saturday"},
        headers=mechanic_auth,
    ).json()
    assert quote["status"] == "pending"

    accepted = client.put(f"/api/quotes/{quote['id']}", json={"status": "accepted"}, headers=client_auth).json()
    assert accepted["status"] == "accepted"

    booking = client.post(
        "/api/bookings/",
        json={"quote_id": quote["id"], "scheduled_date": "2026-11-08T10:00"},
        headers=client_auth,
    ).json()
    assert booking["status"] == "scheduled"
    assert client.get(f"/api/requests/{request['id']}", headers=client_auth).json()["status"] == "in_progress"

    completed = client.put(
        f"/api/bookings/{booking['id']}/status", json={"status": "completed"}, headers=mechanic_auth
    ).json()
    assert completed["status"] == "completed"
    assert client.get(f"/api/requests/{request['id']}", headers=client_auth).json()["status"] == "completed"

    review = client.post(
        "/api/reviews/", json={"booking_id": booking["id"], "rating": 5}, headers=client_auth
    )
    assert review.status_code == 201

    mechanic = client.get(f"/api/mechanics/{quote['mechanic_id']}").json()
    assert mechanic["rating"] == 5.0
