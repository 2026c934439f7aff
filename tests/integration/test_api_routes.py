"""End-to-end tests for the HTTP routes against an in-memory store"""


class TestHealthRoute:

    def test_health_reports_database(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["ok"] is True
        assert body["database"] == "ok"
        assert body["version"] == "0.1.0"


class TestIdentityRoutes:

    def test_verify_creates_then_refreshes(self, client):
        payload = {"uid": "firebase-uid-1", "email": "first@example.com", "display_name": "First"}

        created = client.post("/api/auth/verify", json=payload)
        refreshed = client.post("/api/auth/verify", json={**payload, "display_name": "Renamed"})

        assert created.status_code == 200
        assert created.json()["username"] == "user_firebase"
        assert refreshed.json()["first_name"] == "Renamed"
        assert refreshed.json()["username"] == "user_firebase"

    def test_lookup_by_username(self, client, alice):
        response = client.get(f"/api/users/by-username/{alice.username}")

        assert response.status_code == 200
        assert response.json()["id"] == alice.id

    def test_unknown_user_is_404(self, client):
        response = client.get("/api/users/missing")

        assert response.status_code == 404
        assert response.json()["detail"]["error"]["code"] == "NOT_FOUND"


class TestVideoRoutes:

    def test_create_requires_auth(self, client):
        response = client.post("/api/videos", json={"video_url": "https://cdn.example.com/x.mp4"})

        assert response.status_code == 401
        assert response.json()["detail"]["error"]["code"] == "UNAUTHORIZED"

    def test_create_and_read_back(self, client, alice, auth_headers):
        created = client.post(
            "/api/videos",
            json={"video_url": "https://cdn.example.com/x.mp4", "is_public": "false"},
            headers=auth_headers(alice.id),
        )
        assert created.status_code == 200
        video = created.json()
        assert video["title"] == "Untitled Video"
        assert video["is_public"] is False

        fetched = client.get(f"/api/videos/{video['id']}")
        assert fetched.status_code == 200
        assert fetched.json()["user"]["id"] == alice.id

        feed = client.get("/api/videos/feed")
        assert feed.json() == []

    def test_bad_visibility_flag_is_422(self, client, alice, auth_headers):
        response = client.post(
            "/api/videos",
            json={"video_url": "https://cdn.example.com/x.mp4", "is_public": "sometimes"},
            headers=auth_headers(alice.id),
        )

        assert response.status_code == 422

    def test_feed_paging_params(self, client, alice, make_video):
        ids = [make_video(alice.id, title=f"clip {i}").id for i in range(3)]

        page = client.get("/api/videos/feed", params={"limit": "2", "offset": "1"})
        fallback = client.get("/api/videos/feed", params={"limit": "lots", "offset": "-1"})

        assert page.status_code == 200
        assert [v["id"] for v in page.json()] == [ids[1], ids[0]]
        assert len(fallback.json()) == 3
        assert "email" not in page.json()[0]["user"]

    def test_out_of_range_paging_uses_defaults(self, client, alice, make_video):
        make_video(alice.id)

        for params in ({"limit": "\u00b2"}, {"limit": "\u2460"}, {"offset": "99999999999999999999999"}):
            response = client.get("/api/videos/feed", params=params)
            assert response.status_code == 200
            assert len(response.json()) == 1

    def test_missing_video_is_404(self, client):
        assert client.get("/api/videos/777").status_code == 404

    def test_owner_videos(self, client, alice, make_video):
        video = make_video(alice.id)

        response = client.get(f"/api/users/{alice.id}/videos")

        assert [v["id"] for v in response.json()] == [video.id]


class TestEngagementRoutes:

    def test_like_toggle_round_trip(self, client, alice, bob, make_video, auth_headers):
        video = make_video(alice.id)

        first = client.post(f"/api/videos/{video.id}/like", headers=auth_headers(bob.id))
        second = client.post(f"/api/videos/{video.id}/like", headers=auth_headers(bob.id))

        assert first.json() == {"liked": True}
        assert second.json() == {"liked": False}
        assert client.get(f"/api/videos/{video.id}").json()["likes_count"] == 0

    def test_like_missing_video_is_404(self, client, bob, auth_headers):
        response = client.post("/api/videos/404/like", headers=auth_headers(bob.id))

        assert response.status_code == 404

    def test_comment_and_comment_like(self, client, alice, bob, make_video, auth_headers):
        video = make_video(alice.id)

        created = client.post(
            f"/api/videos/{video.id}/comments",
            json={"content": "love it"},
            headers=auth_headers(bob.id),
        )
        assert created.status_code == 200
        comment = created.json()
        assert comment["user"]["id"] == bob.id

        liked = client.post(f"/api/comments/{comment['id']}/like", headers=auth_headers(alice.id))
        assert liked.json() == {"liked": True}

        listed = client.get(f"/api/videos/{video.id}/comments").json()
        assert listed[0]["likes_count"] == 1
        assert client.get(f"/api/videos/{video.id}").json()["comments_count"] == 1

    def test_blank_comment_is_422(self, client, alice, bob, make_video, auth_headers):
        video = make_video(alice.id)

        response = client.post(
            f"/api/videos/{video.id}/comments",
            json={"content": "   "},
            headers=auth_headers(bob.id),
        )

        assert response.status_code == 422

    def test_follow_and_lists(self, client, alice, bob, auth_headers):
        response = client.post(f"/api/users/{alice.id}/follow", headers=auth_headers(bob.id))

        assert response.json() == {"following": True}
        assert [u["id"] for u in client.get(f"/api/users/{alice.id}/followers").json()] == [bob.id]
        assert [u["id"] for u in client.get(f"/api/users/{bob.id}/following").json()] == [alice.id]
        assert client.get(f"/api/users/{alice.id}").json()["followers_count"] == 1

    def test_self_follow_is_400(self, client, alice, auth_headers):
        response = client.post(f"/api/users/{alice.id}/follow", headers=auth_headers(alice.id))

        assert response.status_code == 400
        error = response.json()["detail"]["error"]
        assert error["code"] == "VALIDATION_FAILED"
        assert error["message"] == "following_id: Cannot follow yourself"
