"""
HTTP-level tests for the MenuBoard API using FastAPI's TestClient.
"""

import json

from test_fixtures import (
    CURRY,
    OTHER_PNG_BYTES,
    PNG_BYTES,
    SOUP,
    meal_form,
    photo_file,
    uploaded_files,
)


def test_health_check(client):
    r = client.get("/health-check")
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "service": "MenuBoard", "storage_backend": "json"}
    assert "X-Request-ID" in r.headers


def test_create_then_delete_meal_scenario(client):
    """POST a meal without a photo, then DELETE it"""
    r = client.post("/api/meals", data=meal_form(SOUP))
    assert r.status_code == 200
    body = r.json()
    assert body["name"] == "Soup"
    assert body["description"] == "Tomato soup"
    assert body["photo"] == ""
    assert body["halfServeAvailable"] is False
    assert body["headingId"] is None
    meal_id = body["id"]

    listed = client.get("/api/data").json()
    assert [m["id"] for m in listed["meals"]] == [meal_id]

    r2 = client.delete(f"/api/meals/{meal_id}")
    assert r2.status_code == 200
    assert r2.json()["id"] == meal_id

    assert client.get("/api/data").json()["meals"] == []
    assert client.get(f"/api/meals/{meal_id}").status_code == 404


def test_create_meal_with_photo_is_served(client):
    r = client.post("/api/meals", data=meal_form(CURRY), files=photo_file())
    assert r.status_code == 200
    photo = r.json()["photo"]
    assert photo.startswith("/uploads/")

    served = client.get(photo)
    assert served.status_code == 200
    assert served.content == PNG_BYTES

    fetched = client.get(f"/api/meals/{r.json()['id']}")
    assert fetched.json()["photo"] == photo


def test_create_meal_missing_field(client, app_settings):
    r = client.post(
        "/api/meals", data=meal_form({"name": "Soup"}), files=photo_file()
    )
    assert r.status_code == 400
    assert r.json()["error"] == "Missing required field: description"
    assert client.get("/api/meals").json() == []
    assert uploaded_files(app_settings) == []


def test_create_meal_bad_payloads(client):
    r = client.post("/api/meals", data={"meal": "{not json"})
    assert r.status_code == 400
    assert "error" in r.json()

    r2 = client.post("/api/meals", data={"meal": "[1, 2]"})
    assert r2.status_code == 400
    assert r2.json()["error"] == "Meal data must be a JSON object"

    r3 = client.post("/api/meals", data={"other": "x"})
    assert r3.status_code == 400
    assert r3.json()["error"] == "Missing meal data"

    r4 = client.post("/api/meals", data=meal_form({**SOUP, "halfServeAvailable": "maybe"}))
    assert r4.status_code == 400
    assert r4.json()["error"] == "Invalid meal data"


def test_create_meal_non_image_rejected(client, app_settings):
    r = client.post(
        "/api/meals",
        data=meal_form(SOUP),
        files=photo_file(b"hello", "notes.txt", "text/plain"),
    )
    assert r.status_code == 400
    assert r.json()["error"] == "Only image files are allowed"
    assert client.get("/api/meals").json() == []
    assert uploaded_files(app_settings) == []


def test_create_meal_oversize_rejected(client, app_settings):
    r = client.post(
        "/api/meals",
        data=meal_form(SOUP),
        files=photo_file(b"\x00" * (app_settings.max_upload_bytes + 1)),
    )
    assert r.status_code == 400
    assert "too large" in r.json()["error"]
    assert client.get("/api/meals").json() == []
    assert uploaded_files(app_settings) == []


def test_heading_form_field_overrides_heading_id(client):
    r = client.post(
        "/api/meals", data=meal_form({**SOUP, "headingId": "a"}, heading="b")
    )
    assert r.status_code == 200
    assert r.json()["headingId"] == "b"


def test_update_meal_replaces_photo(client):
    created = client.post("/api/meals", data=meal_form(SOUP), files=photo_file()).json()
    old_photo = created["photo"]

    r = client.put(
        f"/api/meals/{created['id']}",
        data=meal_form({"name": "Soup of the day"}),
        files=photo_file(OTHER_PNG_BYTES, "new.png"),
    )
    assert r.status_code == 200
    body = r.json()
    assert body["name"] == "Soup of the day"
    assert body["description"] == "Tomato soup"
    assert body["photo"] != old_photo

    assert client.get(old_photo).status_code == 404
    assert client.get(body["photo"]).content == OTHER_PNG_BYTES


def test_update_meal_without_photo_keeps_reference(client):
    created = client.post("/api/meals", data=meal_form(SOUP), files=photo_file()).json()

    r = client.put(
        f"/api/meals/{created['id']}",
        data=meal_form({"halfServeAvailable": True, "photo": ""}),
    )
    assert r.status_code == 200
    assert r.json()["photo"] == created["photo"]
    assert r.json()["halfServeAvailable"] is True
    assert client.get(created["photo"]).status_code == 200


def test_update_unknown_meal(client):
    r = client.put("/api/meals/does-not-exist", data=meal_form(SOUP))
    assert r.status_code == 404
    assert r.json() == {"error": "Meal not found"}


def test_delete_meal_removes_photo(client):
    created = client.post("/api/meals", data=meal_form(SOUP), files=photo_file()).json()

    r = client.delete(f"/api/meals/{created['id']}")
    assert r.status_code == 200
    assert client.get(created["photo"]).status_code == 404


def test_delete_unknown_meal(client):
    r = client.delete("/api/meals/does-not-exist")
    assert r.status_code == 404
    assert r.json() == {"error": "Meal not found"}


def test_headings_crud(client):
    r = client.post("/api/headings", json={"name": "Mains"})
    assert r.status_code == 200
    heading = r.json()
    assert heading["name"] == "Mains"

    assert client.get("/api/headings").json() == [heading]

    r2 = client.put(f"/api/headings/{heading['id']}", json={"name": "Main courses"})
    assert r2.status_code == 200
    assert r2.json() == {"id": heading["id"], "name": "Main courses"}

    r3 = client.delete(f"/api/headings/{heading['id']}")
    assert r3.status_code == 200
    assert r3.json()["id"] == heading["id"]
    assert client.get("/api/headings").json() == []


def test_headings_errors(client):
    r = client.post("/api/headings", json={})
    assert r.status_code == 400
    assert r.json()["error"] == "Heading name is required"

    r2 = client.put("/api/headings/unknown", json={"name": "x"})
    assert r2.status_code == 404
    assert r2.json() == {"error": "Heading not found"}

    r3 = client.put("/api/headings/unknown", json={"name": ""})
    assert r3.status_code == 400

    r4 = client.delete("/api/headings/unknown")
    assert r4.status_code == 404


def test_data_includes_meals_and_headings(client):
    heading = client.post("/api/headings", json={"name": "Soups"}).json()
    meal = client.post(
        "/api/meals", data=meal_form({**SOUP, "headingId": heading["id"]})
    ).json()

    data = client.get("/api/data").json()
    assert data == {"meals": [meal], "headings": [heading]}


def test_deleting_heading_keeps_meals(client):
    heading = client.post("/api/headings", json={"name": "Soups"}).json()
    meal = client.post(
        "/api/meals", data=meal_form({**SOUP, "headingId": heading["id"]})
    ).json()

    client.delete(f"/api/headings/{heading['id']}")

    assert client.get(f"/api/meals/{meal['id']}").json() == meal


def test_legacy_meal_without_description_does_not_break_listing(client, app_settings):
    meal = client.post("/api/meals", data=meal_form(SOUP)).json()
    stored = json.loads(app_settings.data_file.read_text())
    stored["meals"].append({"id": "legacy1", "name": "Old"})
    app_settings.data_file.write_text(json.dumps(stored))

    r = client.get("/api/data")
    assert r.status_code == 200
    assert r.json()["meals"] == [meal]
    assert client.get("/api/meals").json() == [meal]

    assert client.delete("/api/meals/legacy1").status_code == 200
