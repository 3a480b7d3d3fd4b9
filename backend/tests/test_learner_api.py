from __future__ import annotations

PAYLOAD = {
    "name": "Grace Hopper",
    "email": "grace@example.com",
    "position": "Engineer",
    "department": "Compilers",
    "joinedDate": "2024-01-15",
    "aiProfile": {"skills": ["COBOL", "Leadership"], "currentLevel": "senior", "weakAreas": ["Kubernetes"]},
}


def _create(client, **overrides):
    response = client.post("/api/learners", json={**PAYLOAD, **overrides})
    assert response.status_code == 201, response.text
    return response.json()


def test_create_and_fetch_learner(client) -> None:
    created = _create(client)
    assert created["id"] > 0
    assert created["joined_date"] == "2024-01-15"
    assert created["ai_profile"]["skills"] == ["COBOL", "Leadership"]
    assert created["ai_profile"]["weak_areas"] == ["Kubernetes"]

    fetched = client.get(f"/api/learners/{created['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["email"] == "grace@example.com"

    by_email = client.get("/api/learners/by-email/grace@example.com")
    assert by_email.status_code == 200
    assert by_email.json()["id"] == created["id"]


def test_snake_case_input_is_accepted(client) -> None:
    response = client.post(
        "/api/learners",
        json={
            "name": "Snake Case",
            "email": "snake@example.com",
            "joined_date": "2023-05-01",
            "ai_profile": {"skills": ["Python"], "current_level": "junior"},
        },
    )
    assert response.status_code == 201
    body = response.json()
    assert body["joined_date"] == "2023-05-01"
    assert body["ai_profile"]["current_level"] == "junior"


def test_duplicate_email_conflicts(client) -> None:
    _create(client)
    response = client.post("/api/learners", json=PAYLOAD)
    assert response.status_code == 409
    assert response.json() == {"error": "Learner with email grace@example.com already exists"}


def test_missing_learner_returns_404(client) -> None:
    assert client.get("/api/learners/999").json() == {"error": "Learner with ID 999 not found"}
    response = client.get("/api/learners/by-email/nobody@example.com")
    assert response.status_code == 404
    assert response.json() == {"error": "Learner with email nobody@example.com not found"}


def test_list_is_paged_newest_first(client) -> None:
    first = _create(client, email="one@example.com")
    second = _create(client, email="two@example.com")
    third = _create(client, email="three@example.com")

    page = client.get("/api/learners", params={"page": 1, "page_size": 2}).json()
    assert page["total_count"] == 3
    assert [learner["id"] for learner in page["learners"]] == [third["id"], second["id"]]

    rest = client.get("/api/learners", params={"page": 2, "page_size": 2}).json()
    assert [learner["id"] for learner in rest["learners"]] == [first["id"]]


def test_update_ignores_empty_fields(client) -> None:
    created = _create(client)
    response = client.put(f"/api/learners/{created['id']}", json={"name": "", "position": "Rear Admiral"})
    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Grace Hopper"
    assert body["position"] == "Rear Admiral"


def test_update_conflicting_email(client) -> None:
    _create(client, email="taken@example.com")
    other = _create(client, email="free@example.com")
    response = client.put(f"/api/learners/{other['id']}", json={"email": "taken@example.com"})
    assert response.status_code == 409
    assert response.json() == {"error": "Email taken@example.com is already taken"}

    missing = client.put("/api/learners/999", json={"name": "Nobody"})
    assert missing.status_code == 404


def test_delete_learner(client) -> None:
    created = _create(client)
    assert client.delete(f"/api/learners/{created['id']}").status_code == 204
    assert client.get(f"/api/learners/{created['id']}").status_code == 404
    assert client.delete(f"/api/learners/{created['id']}").status_code == 404


def test_invalid_payload_is_rejected(client) -> None:
    response = client.post("/api/learners", json={**PAYLOAD, "name": ""})
    assert response.status_code == 422
