def test_register_client(client):
    response = client.post(
        "/api/auth/register",
        json={
            "name": "Alice Owner",
            "email": "alice@example.com",
            "password": "secret123",
            "phone": "0712345678",
        },
    )
    assert response.status_code == 201
    data = response.json()
    assert data["message"] == "User registered successfully"
    assert data["token_type"] == "bearer"
    assert data["access_token"]
    assert data["user"]["email"] == "alice@example.com"
    assert data["user"]["role"] == "client"
    assert "hashed_password" not in data["user"]


def test_register_duplicate_email(client, register):
    register("client", email="dup@example.com")
    response = client.post(
        "/api/auth/register",
        json={
            "name": "Someone Else",
            "email": "dup@example.com",
            "password": "secret123",
            "role": "mechanic",
            "phone": "0700000099",
        },
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Email already registered"


def test_register_rejects_invalid_payload(client):
    response = client.post(
        "/api/auth/register",
        json={"name": "Bad", "email": "not-an-email", "password": "123", "phone": "0700"},
    )
    # Validation failures are reported as 400
    assert response.status_code == 400


def test_register_mechanic_creates_profile(client, register):
    headers, user = register("mechanic")
    assert user["role"] == "mechanic"

    response = client.get("/api/mechanics/me", headers=headers)
    assert response.status_code == 200
    assert response.json()["user_id"] == user["id"]


def test_login(client, register):
    register("client", email="login@example.com", password="hunter22")

    response = client.post("/api/auth/login", json={"email": "login@example.com", "password": "hunter22"})
    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Login successful"
    assert data["user"]["email"] == "login@example.com"

    profile = client.get("/api/auth/profile", headers={"Authorization": f"Bearer {data['access_token']}"})
    assert profile.status_code == 200


def test_login_wrong_password(client, register):
    register("client", email="login@example.com", password="hunter22")

    response = client.post("/api/auth/login", json={"email": "login@example.com", "password": "wrong-one"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid credentials"


def test_login_unknown_email(client):
    response = client.post("/api/auth/login", json={"email": "ghost@example.com", "password": "whatever"})
    assert response.status_code == 401


def test_token_form_flow(client, register):
    register("mechanic", email="form@example.com", password="hunter22")

    response = client.post("/api/auth/token", data={"username": "form@example.com", "password": "hunter22"})
    assert response.status_code == 200
    assert response.json()["token_type"] == "bearer"


def test_profile_requires_token(client):
    assert client.get("/api/auth/profile").status_code == 401


def test_profile_rejects_bad_token(client):
    response = client.get("/api/auth/profile", headers={"Authorization": "Bearer not.a.token"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid or expired token"


def test_update_profile(client, client_auth):
    response = client.put("/api/auth/profile", json={"name": "Alice Renamed"}, headers=client_auth)
    assert response.status_code == 200
    assert response.json()["name"] == "Alice Renamed"


def test_update_profile_without_changes(client, client_auth):
    response = client.put("/api/auth/profile", json={}, headers=client_auth)
    assert response.status_code == 400


def test_change_password(client, register):
    headers, _ = register("client", email="pw@example.com", password="oldpass1")

    wrong = client.put(
        "/api/auth/change-password",
        json={"current_password": "nope-nope", "new_password": "newpass1"},
        headers=headers,
    )
    assert wrong.status_code == 401

    ok = client.put(
        "/api/auth/change-password",
        json={"current_password": "oldpass1", "new_password": "newpass1"},
        headers=headers,
    )
    assert ok.status_code == 200

    login = client.post("/api/auth/login", json={"email": "pw@example.com", "password": "newpass1"})
    assert login.status_code == 200


def test_delete_account(client, client_auth, make_vehicle):
    make_vehicle(client_auth)

    response = client.delete("/api/auth/profile", headers=client_auth)
    assert response.status_code == 200

    # The token now points at a missing user
    assert client.get("/api/auth/profile", headers=client_auth).status_code == 401


def test_deleting_mechanic_reopens_booked_request(client, client_auth, mechanic_auth, register, booking, make_quote):
    response = client.delete("/api/auth/profile", headers=mechanic_auth)
    assert response.status_code == 200

    request = client.get(f"/api/requests/{booking['request_id']}", headers=client_auth).json()
    assert request["status"] == "open"
    assert request["quote_count"] == 0
    assert client.get("/api/bookings/", headers=client_auth).json()["total"] == 0

    # Other mechanics can pick the job up again
    other, _ = register("mechanic")
    make_quote(other, booking["request_id"])


def test_deleting_client_recomputes_mechanic_rating(
    client, client_auth, mechanic_auth, register, completed_booking, make_request, make_quote
):
    mechanic_id = completed_booking["mechanic_id"]
    client.post("/api/reviews/", json={"booking_id": completed_booking["id"], "rating": 2}, headers=client_auth)

    # A second customer of the same mechanic
    second, _ = register("client")
    request = make_request(second)
    quote = make_quote(mechanic_auth, request["id"])
    client.put(f"/api/quotes/{quote['id']}/accept", headers=second)
    booking = client.post(
        "/api/bookings/", json={"quote_id": quote["id"], "scheduled_date": "2026-12-01"}, headers=second
    ).json()
    client.post(f"/api/bookings/{booking['id']}/complete", headers=mechanic_auth)
    client.post("/api/reviews/", json={"booking_id": booking["id"], "rating": 5}, headers=second)
    assert client.get(f"/api/mechanics/{mechanic_id}").json()["rating"] == 3.5

    assert client.delete("/api/auth/profile", headers=client_auth).status_code == 200

    assert client.get(f"/api/mechanics/{mechanic_id}").json()["rating"] == 5.0
    stats = client.get(f"/api/reviews/mechanic/{mechanic_id}").json()["stats"]
    assert stats["total_reviews"] == 1
