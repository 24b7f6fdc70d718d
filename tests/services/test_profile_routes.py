"""Profile & User Routes — own-account edits, avatars and public profiles.

Invariants:
    - Avatar upload accepts JPEG/PNG/GIF only, stores under the upload dir, swaps files
    - Profile collisions surface as USER_EXISTS; empty updates as EMPTY_UPDATE
"""

from pathlib import Path

from articlehub.config import get_settings

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def _stored_path(avatar_url: str) -> Path:
    return Path(get_settings().upload_dir) / avatar_url.rsplit("/", 1)[-1]


async def _upload(client, who, content=PNG, content_type="image/png", name="me.png"):
    return await client.post(
        "/api/profile/avatar",
        files={"avatar": (name, content, content_type)},
        headers=who["headers"],
    )


async def test_get_profile(client, alice):
    res = await client.get("/api/profile", headers=alice["headers"])
    assert res.status_code == 200
    assert res.json()["user"]["username"] == "alice"


async def test_update_profile(client, alice):
    res = await client.put(
        "/api/profile", json={"username": "alice2"}, headers=alice["headers"],
    )
    assert res.status_code == 200
    assert res.json()["user"]["username"] == "alice2"

    me = await client.get("/api/auth/me", headers=alice["headers"])
    assert me.json()["user"]["username"] == "alice2"


async def test_update_profile_collision(client, alice, bob):
    res = await client.put(
        "/api/profile", json={"email": "bob@mail.com"}, headers=alice["headers"],
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "USER_EXISTS"


async def test_update_profile_to_own_values_is_allowed(client, alice):
    res = await client.put(
        "/api/profile", json={"email": "alice@mail.com"}, headers=alice["headers"],
    )
    assert res.status_code == 200


async def test_empty_update(client, alice):
    res = await client.put("/api/profile", json={}, headers=alice["headers"])
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "EMPTY_UPDATE"


async def test_avatar_upload_and_replace(client, alice):
    first = await _upload(client, alice)
    assert first.status_code == 200
    first_url = first.json()["avatar_url"]
    assert first_url.startswith(f"/uploads/avatar-{alice['user']['id']}-")
    assert first_url.endswith(".png")
    assert _stored_path(first_url).read_bytes() == PNG

    served = await client.get(first_url)
    assert served.status_code == 200
    assert served.content == PNG

    second = await _upload(client, alice, content=b"GIF89a" + b"\x00" * 10,
                           content_type="image/gif", name="me.gif")
    second_url = second.json()["avatar_url"]
    assert second_url != first_url
    assert not _stored_path(first_url).exists()
    assert _stored_path(second_url).exists()


async def test_avatar_rejects_unsupported_type(client, alice):
    res = await _upload(client, alice, content=b"%PDF-1.4", content_type="application/pdf",
                        name="cv.pdf")
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_UPLOAD"


async def test_avatar_rejects_oversized_file(client, alice, monkeypatch):
    monkeypatch.setattr(get_settings(), "upload_max_bytes", 16)
    res = await _upload(client, alice)
    assert res.status_code == 400
    assert "too large" in res.json()["error"]["message"]


async def test_avatar_missing_file(client, alice):
    res = await client.post("/api/profile/avatar", headers=alice["headers"])
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_UPLOAD"


async def test_delete_avatar(client, alice):
    url = (await _upload(client, alice)).json()["avatar_url"]
    res = await client.delete("/api/profile/avatar", headers=alice["headers"])
    assert res.status_code == 200
    assert res.json()["user"]["avatar_url"] is None
    assert not _stored_path(url).exists()


async def test_delete_avatar_when_none(client, alice):
    res = await client.delete("/api/profile/avatar", headers=alice["headers"])
    assert res.status_code == 404


async def test_public_profile_statistics(client, alice, article, comment):
    res = await client.get(f"/api/users/{alice['user']['id']}")
    assert res.status_code == 200
    user = res.json()["user"]
    assert "email" not in user
    assert user["statistics"] == {"articles_count": 1, "comments_count": 1}


async def test_public_profile_unknown_user(client):
    res = await client.get("/api/users/999")
    assert res.status_code == 404
