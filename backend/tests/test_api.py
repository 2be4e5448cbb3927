"""HTTP API: routes, status codes and error bodies."""

from sydai.leaderboard.service import LEADERBOARD_MIN_TOTAL_USERS
from sydai.messages.service import CANNED_RESPONSES, WELCOME_MESSAGE


class TestHealth:

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.headers["X-Frame-Options"] == "DENY"


class TestAuthEndpoints:

    def test_register_and_me(self, client, register):
        user, headers = register("alice")

        assert user["username"] == "alice"
        assert user["points"] == 0

        me = client.get("/api/v1/auth/me", headers=headers)
        assert me.status_code == 200
        assert me.json()["email"] == "alice@example.com"

    def test_register_seeds_welcome(self, client, register):
        _, headers = register("alice")

        messages = client.get("/api/v1/messages", headers=headers).json()
        assert [m["content"] for m in messages] == [WELCOME_MESSAGE]

        count = client.get("/api/v1/notifications/unread-count", headers=headers).json()
        assert count == {"count": 1}

    def test_duplicate_email(self, client, register):
        register("alice")

        response = client.post("/api/v1/auth/register", json={
            "email": "alice@example.com",
            "username": "alice2",
            "password": "secret123",
        })

        assert response.status_code == 400

    def test_password_confirmation_mismatch(self, client):
        response = client.post("/api/v1/auth/register", json={
            "email": "bob@example.com",
            "username": "bob",
            "password": "secret123",
            "confirm_password": "different",
        })

        assert response.status_code == 422

    def test_login(self, client, register):
        register("alice")

        ok = client.post("/api/v1/auth/login", json={"email": "alice@example.com", "password": "secret123"})
        bad = client.post("/api/v1/auth/login", json={"email": "alice@example.com", "password": "wrong-pass"})

        assert ok.status_code == 200
        assert ok.json()["access_token"]
        assert bad.status_code == 401

    def test_requires_token(self, client):
        assert client.get("/api/v1/auth/me").status_code == 401
        assert client.post("/api/v1/checkin").status_code == 401
        assert client.get("/api/v1/referral").status_code == 401

    def test_invalid_token(self, client):
        response = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-token"})
        assert response.status_code == 401


class TestReferralOnRegistration:

    def test_referrer_rewarded(self, client, register):
        _, alice_headers = register("alice")
        code = client.get("/api/v1/referral", headers=alice_headers).json()["referral_code"]

        register("bob", referral_code=code.lower())

        stats = client.get("/api/v1/referral", headers=alice_headers).json()
        assert stats["total_referrals"] == 1
        assert stats["total_points"] == 20
        assert client.get("/api/v1/auth/me", headers=alice_headers).json()["points"] == 20

    def test_unusable_code_does_not_block_registration(self, client, register):
        user, _ = register("bob", referral_code="NOPE2345")
        assert user["points"] == 0

    def test_validate_code(self, client, register):
        _, headers = register("alice")
        code = client.get("/api/v1/referral", headers=headers).json()["referral_code"]

        assert client.get(f"/api/v1/referral/validate/{code}").json()["valid"] is True
        assert client.get("/api/v1/referral/validate/ZZZZZZZZ").json()["valid"] is False


class TestReferralEndpoints:

    def test_stats_shape(self, client, register):
        _, headers = register("alice")

        stats = client.get("/api/v1/referral", headers=headers).json()

        assert len(stats["referral_code"]) == 8
        assert stats["referral_link"] == f"https://sydai.test/signup?ref={stats['referral_code']}"
        assert stats["total_referrals"] == 0
        assert stats["total_points"] == 0

    def test_complete(self, client, register):
        alice, alice_headers = register("alice")
        _, bob_headers = register("bob")
        code = client.get("/api/v1/referral", headers=alice_headers).json()["referral_code"]

        first = client.post("/api/v1/referral/complete", json={"referral_code": code}, headers=bob_headers)
        again = client.post("/api/v1/referral/complete", json={"referral_code": code}, headers=bob_headers)

        assert first.status_code == 200
        assert first.json() == {"success": True, "referrer_id": alice["id"]}
        assert again.status_code == 404
        assert again.json()["code"] == "invalid_or_used_code"

    def test_already_referred_user_rejected(self, client, register):
        _, alice_headers = register("alice")
        _, bob_headers = register("bob")
        alice_code = client.get("/api/v1/referral", headers=alice_headers).json()["referral_code"]
        _, carol_headers = register("carol", referral_code=alice_code)
        bob_code = client.get("/api/v1/referral", headers=bob_headers).json()["referral_code"]

        response = client.post("/api/v1/referral/complete", json={"referral_code": bob_code}, headers=carol_headers)

        assert response.status_code == 404
        assert response.json()["code"] == "invalid_or_used_code"
        assert client.get("/api/v1/auth/me", headers=bob_headers).json()["points"] == 0

    def test_own_code_rejected(self, client, register):
        _, headers = register("alice")
        code = client.get("/api/v1/referral", headers=headers).json()["referral_code"]

        response = client.post("/api/v1/referral/complete", json={"referral_code": code}, headers=headers)

        assert response.status_code == 404
        assert response.json()["code"] == "invalid_or_used_code"


class TestCheckinEndpoints:

    def test_checkin_once_per_day(self, client, register, clock):
        _, headers = register("alice")

        status = client.get("/api/v1/checkin", headers=headers).json()
        assert status["checked_in_today"] is False
        assert status["state"] == "never_checked_in"

        first = client.post("/api/v1/checkin", headers=headers)
        assert first.status_code == 200
        assert first.json()["points_awarded"] == 10
        assert first.json()["user"]["points"] == 10

        second = client.post("/api/v1/checkin", headers=headers)
        assert second.status_code == 400
        assert second.json()["code"] == "already_checked_in"

        status = client.get("/api/v1/checkin", headers=headers).json()
        assert status["checked_in_today"] is True
        assert status["next_checkin_at"].startswith("2025-01-02T00:00:00")

        clock.advance(days=1)
        assert client.post("/api/v1/checkin", headers=headers).status_code == 200
        assert client.get("/api/v1/auth/me", headers=headers).json()["points"] == 20


class TestLeaderboardEndpoints:

    def test_public_page(self, client, register, services):
        alice, _ = register("alice")
        bob, _ = register("bob")
        services.ledger.award_points(bob["id"], 30)
        services.ledger.award_points(alice["id"], 5)

        body = client.get("/api/v1/leaderboard").json()

        assert body["page"] == 0
        assert body["page_size"] == 10
        assert body["total_users"] == LEADERBOARD_MIN_TOTAL_USERS
        assert body["has_more"] is False
        assert [(e["username"], e["rank"]) for e in body["entries"]] == [("bob", 1), ("alice", 2)]

    def test_negative_page_rejected(self, client):
        assert client.get("/api/v1/leaderboard?page=-1").status_code == 422

    def test_my_rank(self, client, register, services):
        register("alice")
        bob, bob_headers = register("bob")
        services.ledger.award_points(bob["id"], 1)

        assert client.get("/api/v1/leaderboard/me", headers=bob_headers).json()["rank"] == 1


class TestMessageEndpoints:

    def test_send_awards_point(self, client, register):
        _, headers = register("alice")

        response = client.post("/api/v1/messages", json={"content": "hello"}, headers=headers)

        assert response.status_code == 200
        body = response.json()
        assert body["points"] == 1
        assert body["message"]["content"] == "hello"
        assert body["reply"]["content"] in CANNED_RESPONSES
        assert client.get("/api/v1/auth/me", headers=headers).json()["points"] == 1

    def test_blank_message(self, client, register):
        _, headers = register("alice")

        response = client.post("/api/v1/messages", json={"content": "   "}, headers=headers)

        assert response.status_code == 400


class TestNotificationEndpoints:

    def test_flow(self, client, register):
        _, alice_headers = register("alice")
        _, bob_headers = register("bob")

        client.post("/api/v1/checkin", headers=alice_headers)
        notifications = client.get("/api/v1/notifications", headers=alice_headers).json()
        assert notifications[0]["title"] == "Daily Check-in Complete!"
        assert len(notifications) == 2

        target = notifications[0]["id"]
        foreign = client.patch(f"/api/v1/notifications/{target}/read", headers=bob_headers)
        assert foreign.status_code == 404

        read = client.patch(f"/api/v1/notifications/{target}/read", headers=alice_headers)
        assert read.json()["is_read"] is True

        marked = client.post("/api/v1/notifications/mark-all-read", headers=alice_headers).json()
        assert marked == {"success": True, "updated": 1}

        assert client.delete(f"/api/v1/notifications/{target}", headers=alice_headers).status_code == 200
        assert client.delete(f"/api/v1/notifications/{target}", headers=alice_headers).status_code == 404

    def test_create(self, client, register):
        _, headers = register("alice")

        response = client.post("/api/v1/notifications", json={"title": "Note", "message": "Body"}, headers=headers)

        assert response.status_code == 200
        assert response.json()["is_read"] is False


class TestSettingsEndpoints:

    def test_get_and_patch(self, client, register):
        _, headers = register("alice")

        assert client.get("/api/v1/settings", headers=headers).json() == {
            "theme": "light",
            "notifications": True,
            "email_notifications": False,
        }

        patched = client.patch("/api/v1/settings", json={"theme": "dark"}, headers=headers)
        assert patched.json()["theme"] == "dark"
        assert patched.json()["notifications"] is True

        assert client.patch("/api/v1/settings", json={"theme": "neon"}, headers=headers).status_code == 422
