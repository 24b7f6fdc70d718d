"""Comment Routes — per-article threads, pagination and author-only edits."""


async def _comment(client, who, article_id, content):
    res = await client.post(
        f"/api/comments/article/{article_id}", json={"content": content},
        headers=who["headers"],
    )
    assert res.status_code == 201, res.text
    return res.json()["comment"]


async def test_create_comment_shape(client, bob, article):
    comment = await _comment(client, bob, article["id"], "  Great post  ")
    assert comment["content"] == "Great post"
    assert comment["article_id"] == article["id"]
    assert comment["author_username"] == "bob"
    assert comment["reactions_count"] == 0


async def test_comment_on_missing_article(client, bob):
    res = await client.post(
        "/api/comments/article/999", json={"content": "hello"}, headers=bob["headers"],
    )
    assert res.status_code == 404


async def test_list_oldest_first(client, alice, bob, article):
    for i, who in enumerate((alice, bob, alice)):
        await _comment(client, who, article["id"], f"comment {i}")

    res = await client.get(f"/api/comments/article/{article['id']}", params={"limit": 2})
    body = res.json()
    assert [c["content"] for c in body["comments"]] == ["comment 0", "comment 1"]
    assert body["pagination"]["total"] == 3
    assert body["pagination"]["hasNext"] is True


async def test_list_default_and_max_limit(client, article):
    default = await client.get(f"/api/comments/article/{article['id']}")
    clamped = await client.get(f"/api/comments/article/{article['id']}", params={"limit": 1000})
    assert default.json()["pagination"]["limit"] == 20
    assert clamped.json()["pagination"]["limit"] == 100


async def test_list_for_missing_article(client):
    res = await client.get("/api/comments/article/999")
    assert res.status_code == 404


async def test_comments_count_on_article(client, bob, article):
    await _comment(client, bob, article["id"], "one")
    await _comment(client, bob, article["id"], "two")
    res = await client.get(f"/api/articles/{article['id']}")
    assert res.json()["article"]["comments_count"] == 2


async def test_update_comment(client, alice, comment):
    res = await client.put(
        f"/api/comments/{comment['id']}", json={"content": "edited"}, headers=alice["headers"],
    )
    assert res.status_code == 200
    assert res.json()["comment"]["content"] == "edited"


async def test_update_comment_by_other_user(client, bob, comment):
    res = await client.put(
        f"/api/comments/{comment['id']}", json={"content": "mine now"}, headers=bob["headers"],
    )
    assert res.status_code == 403


async def test_delete_comment(client, alice, bob, comment):
    await client.post(
        f"/api/reactions/comment/{comment['id']}", json={"reaction_id": 4},
        headers=bob["headers"],
    )
    res = await client.delete(f"/api/comments/{comment['id']}", headers=alice["headers"])
    assert res.status_code == 200
    assert res.json()["deletedComment"] == {"content": comment["content"]}

    missing = await client.delete(f"/api/comments/{comment['id']}", headers=alice["headers"])
    assert missing.status_code == 404


async def test_comment_reactions_in_listing(client, bob, article, comment):
    await client.post(
        f"/api/reactions/comment/{comment['id']}", json={"reaction_id": 6},
        headers=bob["headers"],
    )
    res = await client.get(f"/api/comments/article/{article['id']}", headers=bob["headers"])
    listed = res.json()["comments"][0]
    assert listed["reactions_count"] == 1
    assert [r["id"] for r in listed["reactions"] if r["user_reacted"]] == [6]
