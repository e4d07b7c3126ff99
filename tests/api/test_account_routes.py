"""Integration tests for account and follow-graph routes.

These tests verify the behavior of the /accounts endpoints:
- POST /accounts - Register an account
- GET /accounts/search, /accounts/suggestions - Discovery
- PUT /accounts/me - Update own profile
- GET /accounts/profile/{username} - Profile with privacy gate
- POST /accounts/{id}/follow - Follow, unfollow or request
- DELETE /accounts/{id}/follow-request - Cancel a request
- POST /accounts/{id}/accept-request, /decline-request - Decide a request
- POST /accounts/{id}/toggle-private - Privacy switch
- GET /accounts/{id}/followers, /following - Follower lists
"""

from tests.fixtures.api import as_account


class TestCreateAccount:
    """Tests for POST /accounts."""

    def test_create_account(self, client_with_service):
        """A new account is returned with 201 and empty follow sets."""
        client, service = client_with_service

        response = client.post("/accounts", json={"username": "dave", "name": "Dave"})

        assert response.status_code == 201
        data = response.json()
        assert data["username"] == "dave"
        assert data["followers"] == []
        assert service.get_account(data["account_id"]).name == "Dave"

    def test_duplicate_username(self, client_with_service, alice):
        """A taken username answers 400 with the ValidationError type."""
        client, _ = client_with_service

        response = client.post("/accounts", json={"username": "alice"})

        assert response.status_code == 400
        assert response.json()["type"] == "ValidationError"

    def test_missing_username(self, client_with_service):
        """A body without a username is rejected by request validation."""
        client, _ = client_with_service
        assert client.post("/accounts", json={}).status_code == 422


class TestFollowRoutes:
    """Tests for the follow-graph transitions."""

    def test_follow_public_account(self, client_with_service, alice, bob):
        """Following a public account creates the edge immediately."""
        client, service = client_with_service

        response = client.post(f"/accounts/{bob.account_id}/follow", headers=as_account(alice.account_id))

        assert response.status_code == 200
        assert response.json() == {
            "following": True,
            "has_requested": False,
            "followers_count": 1,
            "following_count": 1,
        }
        assert service.get_account(bob.account_id).followers == [alice.account_id]

    def test_follow_toggle_unfollows(self, client_with_service, alice, bob):
        """A second call removes the edge."""
        client, _ = client_with_service
        headers = as_account(alice.account_id)

        client.post(f"/accounts/{bob.account_id}/follow", headers=headers)
        response = client.post(f"/accounts/{bob.account_id}/follow", headers=headers)

        assert response.json()["following"] is False
        assert response.json()["followers_count"] == 0

    def test_follow_private_creates_request(self, client_with_service, alice, carol):
        """Following a private account only records a request."""
        client, service = client_with_service

        response = client.post(f"/accounts/{carol.account_id}/follow", headers=as_account(alice.account_id))

        assert response.json()["following"] is False
        assert response.json()["has_requested"] is True
        assert service.get_account(carol.account_id).follow_requests == [alice.account_id]

    def test_follow_self(self, client_with_service, alice):
        """Following yourself answers 400 with the InvalidOperation type."""
        client, _ = client_with_service

        response = client.post(f"/accounts/{alice.account_id}/follow", headers=as_account(alice.account_id))

        assert response.status_code == 400
        assert response.json()["type"] == "InvalidOperation"

    def test_cancel_request(self, client_with_service, alice, carol):
        client, service = client_with_service
        headers = as_account(alice.account_id)
        client.post(f"/accounts/{carol.account_id}/follow", headers=headers)

        response = client.delete(f"/accounts/{carol.account_id}/follow-request", headers=headers)

        assert response.status_code == 200
        assert response.json()["has_requested"] is False
        assert service.get_account(carol.account_id).follow_requests == []

    def test_accept_request(self, client_with_service, alice, carol):
        """The private account owner accepts a pending request."""
        client, service = client_with_service
        client.post(f"/accounts/{carol.account_id}/follow", headers=as_account(alice.account_id))

        response = client.post(
            f"/accounts/{carol.account_id}/accept-request",
            json={"requester_id": alice.account_id},
            headers=as_account(carol.account_id),
        )

        assert response.status_code == 200
        assert response.json()["following"] is True
        assert service.can_view(alice.account_id, carol.account_id) is True

    def test_accept_someone_elses_request(self, client_with_service, alice, bob, carol):
        """Only the account that received a request may decide it."""
        client, _ = client_with_service
        client.post(f"/accounts/{carol.account_id}/follow", headers=as_account(alice.account_id))

        response = client.post(
            f"/accounts/{carol.account_id}/accept-request",
            json={"requester_id": alice.account_id},
            headers=as_account(bob.account_id),
        )

        assert response.status_code == 401

    def test_decline_request(self, client_with_service, alice, carol):
        client, service = client_with_service
        client.post(f"/accounts/{carol.account_id}/follow", headers=as_account(alice.account_id))

        response = client.post(
            f"/accounts/{carol.account_id}/decline-request",
            json={"requester_id": alice.account_id},
            headers=as_account(carol.account_id),
        )

        assert response.status_code == 200
        assert service.get_account(carol.account_id).follow_requests == []

    def test_decline_missing_request(self, client_with_service, alice, carol):
        """Declining a request that does not exist answers 404."""
        client, _ = client_with_service

        response = client.post(
            f"/accounts/{carol.account_id}/decline-request",
            json={"requester_id": alice.account_id},
            headers=as_account(carol.account_id),
        )

        assert response.status_code == 404
        assert response.json()["entity"] == "follow request"


class TestProfileRoutes:
    """Tests for profile reads and updates."""

    def test_get_public_profile(self, client_with_service, alice, bob):
        client, _ = client_with_service

        response = client.get("/accounts/profile/bob", headers=as_account(alice.account_id))

        assert response.status_code == 200
        data = response.json()
        assert data["username"] == "bob"
        assert data["is_own_profile"] is False
        assert data["follow_requests"] is None

    def test_own_profile_lists_requests(self, client_with_service, alice, carol):
        client, _ = client_with_service
        client.post(f"/accounts/{carol.account_id}/follow", headers=as_account(alice.account_id))

        response = client.get("/accounts/profile/carol", headers=as_account(carol.account_id))

        data = response.json()
        assert data["is_own_profile"] is True
        assert [r["username"] for r in data["follow_requests"]] == ["alice"]

    def test_update_profile(self, client_with_service, alice):
        client, service = client_with_service

        response = client.put(
            "/accounts/me", json={"bio": "hello"}, headers=as_account(alice.account_id)
        )

        assert response.status_code == 200
        assert response.json()["bio"] == "hello"
        assert service.get_account(alice.account_id).name == "Alice"

    def test_toggle_private(self, client_with_service, alice, bob):
        client, _ = client_with_service
        url = f"/accounts/{alice.account_id}/toggle-private"

        assert client.post(url, headers=as_account(alice.account_id)).json() == {"is_private": True}
        assert client.post(url, headers=as_account(bob.account_id)).status_code == 401

    def test_followers_and_following(self, client_with_service, alice, bob):
        client, _ = client_with_service
        headers = as_account(alice.account_id)
        client.post(f"/accounts/{bob.account_id}/follow", headers=headers)

        followers = client.get(f"/accounts/{bob.account_id}/followers", headers=headers).json()
        following = client.get(f"/accounts/{alice.account_id}/following", headers=headers).json()

        assert [a["username"] for a in followers] == ["alice"]
        assert [a["username"] for a in following] == ["bob"]


class TestDiscoveryRoutes:
    """Tests for search and suggestions."""

    def test_search(self, client_with_service, alice, bob):
        client, _ = client_with_service

        response = client.get("/accounts/search", params={"q": "bo"}, headers=as_account(alice.account_id))

        assert response.status_code == 200
        assert [a["username"] for a in response.json()] == ["bob"]

    def test_search_too_short(self, client_with_service, alice):
        client, _ = client_with_service

        response = client.get("/accounts/search", params={"q": "b"}, headers=as_account(alice.account_id))

        assert response.status_code == 400

    def test_suggestions(self, client_with_service, alice, bob, carol):
        client, _ = client_with_service
        client.post(f"/accounts/{bob.account_id}/follow", headers=as_account(alice.account_id))

        response = client.get("/accounts/suggestions", headers=as_account(alice.account_id))

        assert [a["username"] for a in response.json()] == ["carol"]
