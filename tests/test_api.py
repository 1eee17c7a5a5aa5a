import json


def create(client, headers, files=None, **fields):
    data = {"title": "Weekend", "destination": "Paris", "tripType": "Leisure"}
    data.update(fields)
    return client.post("/api/itineraries", data=data, files=files, headers=headers)


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_protected_route_without_token_returns_401(client):
    response = client.get("/itineraries")
    assert response.status_code == 401
    assert response.json()["detail"]["error"] == "Unauthorized"


def test_browser_without_session_is_redirected_to_login(client):
    response = client.get("/itineraries", headers={"Accept": "text/html"}, follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/login"


def test_invalid_token_is_rejected(client):
    response = client.get("/itineraries", headers={"Authorization": "Bearer nope"})
    assert response.status_code == 401


def test_register_login_and_profile_via_cookie(client):
    response = client.post(
        "/auth/register",
        json={"name": "Grace", "email": "grace@example.com", "password": "secret123"}
    )
    assert response.status_code == 201
    assert response.json()["user"]["name"] == "Grace"

    client.cookies.clear()
    response = client.post("/auth/login", json={"email": "grace@example.com", "password": "secret123"})
    assert response.status_code == 200
    assert "access_token" in response.cookies

    profile = client.get("/user/profile")
    assert profile.json()["email"] == "grace@example.com"

    client.post("/auth/logout")
    assert client.get("/user/profile").status_code == 401


def test_login_with_wrong_password(client, auth_headers):
    response = client.post("/auth/login", json={"email": "ada@example.com", "password": "wrong"})
    assert response.status_code == 401


def test_register_duplicate_email(client, auth_headers):
    response = client.post(
        "/auth/register",
        json={"name": "Ada", "email": "ada@example.com", "password": "secret123"}
    )
    assert response.status_code == 400
    assert response.json()["detail"]["error"] == "RegistrationError"


def test_create_and_fetch_itinerary(client, auth_headers):
    activities = [{"name": "Hike", "description": "", "date": "2024-05-01"}]
    response = create(client, auth_headers, activities=json.dumps(activities))

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Itinerary created successfully"
    assert body["failedUploads"] == []

    fetched = client.get(f"/itineraries/{body['id']}", headers=auth_headers).json()
    assert fetched["id"] == body["id"]
    assert fetched["tripType"] == "Leisure"
    assert fetched["activities"] == activities
    assert fetched["createdAt"]


def test_create_missing_fields_returns_400(client, auth_headers):
    response = create(client, auth_headers, title="")
    assert response.status_code == 400
    assert response.json()["detail"]["message"] == "Missing required fields"


def test_create_with_bad_activities_returns_400(client, auth_headers):
    response = create(client, auth_headers, activities="[{")
    assert response.status_code == 400
    assert response.json()["detail"]["message"] == "Invalid activities format"


def test_create_with_photos_keeps_going_after_a_failure(client, auth_headers, fake_supabase):
    fake_supabase.storage.failing.add("broken.jpg")
    files = [
        ("photos", ("one.jpg", b"1", "image/jpeg")),
        ("photos", ("broken.jpg", b"2", "image/jpeg")),
        ("photos", ("three.jpg", b"3", "image/jpeg")),
    ]
    body = create(client, auth_headers, files=files).json()

    assert body["failedUploads"] == ["broken.jpg"]
    assert len(body["photos"]) == 2
    assert body["photos"][0].endswith("_one.jpg")
    assert body["photos"][1].endswith("_three.jpg")


def test_list_is_newest_first(client, auth_headers):
    first = create(client, auth_headers, title="First").json()["id"]
    second = create(client, auth_headers, title="Second").json()["id"]

    body = client.get("/itineraries", headers=auth_headers).json()
    assert body["count"] == 2
    assert [it["id"] for it in body["itineraries"]] == [second, first]


def test_get_unknown_itinerary_returns_404(client, auth_headers):
    response = client.get("/itineraries/not-a-real-id", headers=auth_headers)
    assert response.status_code == 404
    assert response.json()["detail"]["error"] == "NotFound"


def test_update_replaces_itinerary(client, auth_headers):
    itinerary_id = create(client, auth_headers, activities=json.dumps([{"name": "Old"}])).json()["id"]

    response = client.put(
        f"/itineraries/{itinerary_id}",
        data={
            "title": "Changed",
            "destination": "Nice",
            "tripType": "Work",
            "activities": json.dumps([{"name": "New", "description": "d", "date": "2024-07-01"}]),
            "existingPhotos": json.dumps(["https://cdn.test/kept.jpg"]),
        },
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json()["photos"] == ["https://cdn.test/kept.jpg"]

    fetched = client.get(f"/itineraries/{itinerary_id}", headers=auth_headers).json()
    assert fetched["destination"] == "Nice"
    assert [a["name"] for a in fetched["activities"]] == ["New"]


def test_update_unknown_itinerary_returns_404(client, auth_headers):
    response = client.put(
        "/itineraries/00000000-0000-0000-0000-000000000000",
        data={"title": "t", "destination": "d"},
        headers=auth_headers,
    )
    assert response.status_code == 404


def test_toggle_favorite_twice(client, auth_headers):
    itinerary_id = create(client, auth_headers).json()["id"]

    assert client.post(f"/itineraries/{itinerary_id}/favorite", headers=auth_headers).json()["favorite"] is True
    assert client.post(f"/itineraries/{itinerary_id}/favorite", headers=auth_headers).json()["favorite"] is False


def test_delete_then_list(client, auth_headers):
    itinerary_id = create(client, auth_headers).json()["id"]

    response = client.delete(f"/itineraries/{itinerary_id}", headers=auth_headers)
    assert response.status_code == 200

    ids = [it["id"] for it in client.get("/itineraries", headers=auth_headers).json()["itineraries"]]
    assert itinerary_id not in ids
    assert client.delete(f"/itineraries/{itinerary_id}", headers=auth_headers).status_code == 404


def test_search_uses_shared_filter(client, auth_headers):
    paris = create(client, auth_headers, destination="Paris", tripType="Leisure").json()["id"]
    create(client, auth_headers, destination="Tokyo", tripType="Work")
    client.post(f"/itineraries/{paris}/favorite", headers=auth_headers)

    body = client.post(
        "/api/search",
        json={"tripType": "Leisure", "favoriteOnly": True},
        headers=auth_headers,
    ).json()
    assert body["count"] == 1
    assert body["itineraries"][0]["id"] == paris

    body = client.post("/api/search", json={"destination": "PAR"}, headers=auth_headers).json()
    assert [it["id"] for it in body["itineraries"]] == [paris]

    body = client.post("/api/search", json={}, headers=auth_headers).json()
    assert body["count"] == 2


def test_unknown_media_backend_returns_error_envelope(client, auth_headers, monkeypatch):
    from app.config import settings
    itinerary_id = create(client, auth_headers).json()["id"]
    monkeypatch.setattr(settings, "media_backend", "ftp")

    response = create(client, auth_headers)
    assert response.status_code == 500
    assert response.json()["detail"]["error"] == "InternalServerError"

    response = client.put(
        f"/itineraries/{itinerary_id}",
        data={"title": "t", "destination": "d"},
        headers=auth_headers,
    )
    assert response.status_code == 500
    assert response.json()["detail"]["message"] == "Error updating itinerary"
