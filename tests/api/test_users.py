"""
End-to-end tests for the user account endpoints.
"""

import pytest

ALICE = {
    "username": "alice_01",
    "password": "longenough1",
    "email": "a@x.com",
    "full_name": "Alice",
}


async def _register(api_client, **overrides) -> str:
    response = await api_client.post("/api/users/register", json={**ALICE, **overrides})
    assert response.status_code == 201, response.text
    return response.json()["data"]["user_id"]


@pytest.mark.asyncio
async def test_register_login_and_fetch_profile(api_client):
    register = await api_client.post("/api/users/register", json=ALICE)
    assert register.status_code == 201
    body = register.json()
    assert body["status"] == "success"
    user_id = body["data"]["user_id"]

    login = await api_client.post(
        "/api/users/login", json={"username": "alice_01", "password": "longenough1"}
    )
    assert login.status_code == 200
    assert login.json()["data"]["token"]

    wrong = await api_client.post(
        "/api/users/login", json={"username": "alice_01", "password": "not-the-password"}
    )
    assert wrong.status_code == 401
    assert wrong.json()["status"] == "fail"

    profile = await api_client.get(f"/api/users/{user_id}")
    assert profile.status_code == 200
    data = profile.json()["data"]
    assert data == {
        "user_id": user_id,
        "username": "alice_01",
        "email": "a@x.com",
        "full_name": "Alice",
    }


@pytest.mark.asyncio
async def test_login_unknown_user_is_404(api_client):
    response = await api_client.post(
        "/api/users/login", json={"username": "nobody", "password": "whatever1"}
    )

    assert response.status_code == 404
    assert response.json()["status"] == "fail"


@pytest.mark.asyncio
async def test_duplicate_registration_is_rejected(api_client, account_repository):
    await _register(api_client)

    response = await api_client.post(
        "/api/users/register", json={**ALICE, "username": "alice_02"}
    )

    assert response.status_code == 400
    assert response.json() == {"status": "fail", "message": "Username or email is already in use."}
    assert len(account_repository.users) == 1


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"username": "al"}, "username must be at least 3 characters long"),
        ({"username": "a" * 21}, "username must be at most 20 characters long"),
        (
            {"username": "alice-01"},
            "username may only contain letters, digits, dots or underscores",
        ),
        ({"email": "not-an-email"}, "email must be a valid email address"),
        ({"password": "short"}, "password must be at least 8 characters long"),
        ({"full_name": ""}, "full_name must not be empty"),
        ({"full_name": "   "}, "full_name must not be empty"),
    ],
)
@pytest.mark.asyncio
async def test_registration_validation_messages(api_client, account_repository, overrides, message):
    response = await api_client.post("/api/users/register", json={**ALICE, **overrides})

    assert response.status_code == 400
    assert response.json() == {"status": "fail", "message": message}
    assert account_repository.users == {}


@pytest.mark.asyncio
async def test_registration_requires_every_field(api_client):
    payload = {k: v for k, v in ALICE.items() if k != "email"}

    response = await api_client.post("/api/users/register", json=payload)

    assert response.status_code == 400
    assert response.json()["message"] == "email is required"


@pytest.mark.asyncio
async def test_login_requires_password(api_client):
    response = await api_client.post("/api/users/login", json={"username": "alice_01"})

    assert response.status_code == 400
    assert response.json()["message"] == "password is required"


@pytest.mark.parametrize(
    "credentials, message",
    [
        ({"username": "", "password": "longenough1"}, "username must not be empty"),
        ({"username": "alice_01", "password": ""}, "password must not be empty"),
    ],
)
@pytest.mark.asyncio
async def test_login_rejects_empty_fields(api_client, credentials, message):
    await _register(api_client)

    response = await api_client.post("/api/users/login", json=credentials)

    assert response.status_code == 400
    assert response.json() == {"status": "fail", "message": message}


@pytest.mark.asyncio
async def test_list_users_hides_passwords(api_client):
    await _register(api_client)
    await _register(api_client, username="bob", email="b@x.com")

    response = await api_client.get("/api/users")

    assert response.status_code == 200
    users = response.json()["data"]
    assert {u["username"] for u in users} == {"alice_01", "bob"}
    assert all("password" not in u and "password_hash" not in u for u in users)


@pytest.mark.asyncio
async def test_get_unknown_user_is_404(api_client):
    response = await api_client.get("/api/users/does-not-exist")

    assert response.status_code == 404
    assert response.json()["status"] == "fail"


@pytest.mark.asyncio
async def test_partial_update_keeps_other_fields(api_client):
    user_id = await _register(api_client)

    response = await api_client.put(f"/api/users/{user_id}", json={"email": "new@x.com"})
    assert response.status_code == 200

    profile = (await api_client.get(f"/api/users/{user_id}")).json()["data"]
    assert profile["email"] == "new@x.com"
    assert profile["username"] == "alice_01"
    assert profile["full_name"] == "Alice"

    login = await api_client.post(
        "/api/users/login", json={"username": "alice_01", "password": "longenough1"}
    )
    assert login.status_code == 200


@pytest.mark.asyncio
async def test_update_password_changes_login(api_client):
    user_id = await _register(api_client)

    await api_client.put(f"/api/users/{user_id}", json={"password": "an0ther-secret"})

    old = await api_client.post(
        "/api/users/login", json={"username": "alice_01", "password": "longenough1"}
    )
    new = await api_client.post(
        "/api/users/login", json={"username": "alice_01", "password": "an0ther-secret"}
    )
    assert old.status_code == 401
    assert new.status_code == 200


@pytest.mark.asyncio
async def test_update_rejects_null_fields(api_client):
    user_id = await _register(api_client)

    response = await api_client.put(f"/api/users/{user_id}", json={"full_name": None})

    assert response.status_code == 400
    assert response.json()["message"] == "full_name must not be null"


@pytest.mark.asyncio
async def test_update_unknown_user_is_404(api_client):
    response = await api_client.put("/api/users/missing", json={"full_name": "Nobody"})

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_user(api_client):
    user_id = await _register(api_client)

    deleted = await api_client.delete(f"/api/users/{user_id}")
    again = await api_client.delete(f"/api/users/{user_id}")
    fetched = await api_client.get(f"/api/users/{user_id}")

    assert deleted.status_code == 200
    assert deleted.json() == {"status": "success", "message": "User deleted."}
    assert again.status_code == 404
    assert fetched.status_code == 404
