import pytest


@pytest.fixture
def post(test_client, user_token, auth_headers):
    response = test_client.post(
        "/api/posts", json={"text": "Hello world"}, headers=auth_headers(user_token)
    )
    assert response.status_code == 200, response.text
    return response.json()


class TestPosts:
    """Test the post lifecycle."""

    def test_create_requires_token(self, test_client):
        response = test_client.post("/api/posts", json={"text": "Hello"})

        assert response.status_code == 401
        assert response.json()["message"] == "No token, authorization denied"

    def test_create_post(self, test_client, user_token, auth_headers, post):
        assert post["text"] == "Hello world"
        assert post["name"] == "Jane Doe"
        assert post["avatar"].startswith("https://www.gravatar.com/avatar/")
        assert post["likes"] == []
        assert post["comments"] == []

        me = test_client.get("/api/auth", headers=auth_headers(user_token)).json()
        assert post["user"] == me["id"]

    def test_create_requires_text(self, test_client, user_token, auth_headers):
        response = test_client.post(
            "/api/posts", json={"text": "   "}, headers=auth_headers(user_token)
        )

        assert response.status_code == 400
        assert response.json()["errors"] == [{"msg": "Text is required", "param": "text"}]

    def test_list_newest_first(self, test_client, user_token, auth_headers, post):
        headers = auth_headers(user_token)
        test_client.post("/api/posts", json={"text": "Second"}, headers=headers)

        response = test_client.get("/api/posts", headers=headers)

        assert response.status_code == 200
        assert [p["text"] for p in response.json()] == ["Second", "Hello world"]

    def test_list_requires_token(self, test_client):
        assert test_client.get("/api/posts").status_code == 401

    def test_get_post(self, test_client, user_token, auth_headers, post):
        response = test_client.get(f"/api/posts/{post['id']}", headers=auth_headers(user_token))

        assert response.status_code == 200
        assert response.json()["id"] == post["id"]

    def test_get_unknown_post(self, test_client, user_token, auth_headers):
        response = test_client.get("/api/posts/unknown", headers=auth_headers(user_token))

        assert response.status_code == 404
        assert response.json()["message"] == "Post not found"

    def test_delete_own_post(self, test_client, user_token, auth_headers, post):
        headers = auth_headers(user_token)

        response = test_client.delete(f"/api/posts/{post['id']}", headers=headers)

        assert response.status_code == 200
        assert response.json() == {"message": "Post removed."}
        assert test_client.get(f"/api/posts/{post['id']}", headers=headers).status_code == 404

    def test_delete_someone_elses_post(
        self, test_client, user_token, other_token, auth_headers, post
    ):
        response = test_client.delete(f"/api/posts/{post['id']}", headers=auth_headers(other_token))

        assert response.status_code == 403
        assert response.json()["message"] == "User not authorized"
        still_there = test_client.get(
            f"/api/posts/{post['id']}", headers=auth_headers(user_token)
        )
        assert still_there.status_code == 200


class TestLikes:
    """Test liking and unliking posts."""

    def test_like(self, test_client, other_token, auth_headers, post):
        response = test_client.put(f"/api/posts/like/{post['id']}", headers=auth_headers(other_token))

        assert response.status_code == 200
        likes = response.json()
        assert len(likes) == 1
        assert likes[0]["id"]

    def test_like_twice(self, test_client, other_token, auth_headers, post):
        headers = auth_headers(other_token)
        test_client.put(f"/api/posts/like/{post['id']}", headers=headers)

        response = test_client.put(f"/api/posts/like/{post['id']}", headers=headers)

        assert response.status_code == 400
        assert response.json()["errors"] == [{"msg": "Post already liked"}]
        likes = test_client.get(f"/api/posts/{post['id']}", headers=headers).json()["likes"]
        assert len(likes) == 1

    def test_likes_from_two_users(self, test_client, user_token, other_token, auth_headers, post):
        test_client.put(f"/api/posts/like/{post['id']}", headers=auth_headers(user_token))
        response = test_client.put(
            f"/api/posts/like/{post['id']}", headers=auth_headers(other_token)
        )

        likes = response.json()
        assert len(likes) == 2
        assert len({like["user"] for like in likes}) == 2

    def test_unlike(self, test_client, user_token, auth_headers, post):
        headers = auth_headers(user_token)
        test_client.put(f"/api/posts/like/{post['id']}", headers=headers)

        response = test_client.put(f"/api/posts/unlike/{post['id']}", headers=headers)

        assert response.status_code == 200
        assert response.json() == []

    def test_unlike_without_like(self, test_client, user_token, auth_headers, post):
        response = test_client.put(
            f"/api/posts/unlike/{post['id']}", headers=auth_headers(user_token)
        )

        assert response.status_code == 400
        assert response.json()["errors"] == [{"msg": "Post has not yet been liked"}]

    def test_like_unknown_post(self, test_client, user_token, auth_headers):
        response = test_client.put("/api/posts/like/unknown", headers=auth_headers(user_token))

        assert response.status_code == 404


class TestComments:
    """Test commenting on posts."""

    def test_add_comment(self, test_client, other_token, auth_headers, post):
        response = test_client.post(
            f"/api/posts/comment/{post['id']}",
            json={"text": "Nice post"},
            headers=auth_headers(other_token),
        )

        assert response.status_code == 200
        comments = response.json()
        assert len(comments) == 1
        assert comments[0]["text"] == "Nice post"
        assert comments[0]["name"] == "John Roe"

    def test_comment_requires_text(self, test_client, user_token, auth_headers, post):
        response = test_client.post(
            f"/api/posts/comment/{post['id']}", json={}, headers=auth_headers(user_token)
        )

        assert response.status_code == 400
        assert response.json()["errors"] == [{"msg": "Text is required", "param": "text"}]

    def test_comment_unknown_post(self, test_client, user_token, auth_headers):
        response = test_client.post(
            "/api/posts/comment/unknown", json={"text": "Hi"}, headers=auth_headers(user_token)
        )

        assert response.status_code == 404

    def test_remove_only_the_requested_comment(self, test_client, user_token, auth_headers, post):
        headers = auth_headers(user_token)
        url = f"/api/posts/comment/{post['id']}"
        test_client.post(url, json={"text": "first"}, headers=headers)
        comments = test_client.post(url, json={"text": "second"}, headers=headers).json()
        assert [c["text"] for c in comments] == ["second", "first"]

        first_id = comments[1]["id"]
        response = test_client.delete(f"{url}/{first_id}", headers=headers)

        assert response.status_code == 200
        assert [c["text"] for c in response.json()] == ["second"]

    def test_remove_unknown_comment(self, test_client, user_token, auth_headers, post):
        response = test_client.delete(
            f"/api/posts/comment/{post['id']}/unknown", headers=auth_headers(user_token)
        )

        assert response.status_code == 404
        assert response.json()["message"] == "Comment does not exist"

    def test_remove_someone_elses_comment(
        self, test_client, user_token, other_token, auth_headers, post
    ):
        url = f"/api/posts/comment/{post['id']}"
        comments = test_client.post(
            url, json={"text": "mine"}, headers=auth_headers(other_token)
        ).json()

        response = test_client.delete(f"{url}/{comments[0]['id']}", headers=auth_headers(user_token))

        assert response.status_code == 403
        remaining = test_client.get(
            f"/api/posts/{post['id']}", headers=auth_headers(user_token)
        ).json()["comments"]
        assert len(remaining) == 1
