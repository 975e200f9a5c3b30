"""Integration tests for /api/auth endpoints."""


class TestRegister:
    def test_register_creates_citizen(self, client):
        response = client.post(
            "/api/auth/register",
            json={
                "email": "nuevo@example.com",
                "full_name": "Nuevo Vecino",
                "password": "parque2024",
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["role"] == "citizen"
        assert data["points"] == 0
        assert "hashed_password" not in data

    def test_duplicate_email_conflicts(self, client, citizen):
        response = client.post(
            "/api/auth/register",
            json={"email": citizen.email, "full_name": "Otra", "password": "parque2024"},
        )

        assert response.status_code == 409
        assert "correlation_id" in response.json()

    def test_weak_password_is_unprocessable(self, client):
        response = client.post(
            "/api/auth/register",
            json={"email": "debil@example.com", "full_name": "Débil", "password": "abc"},
        )
        assert response.status_code == 422

    def test_invalid_email_is_unprocessable(self, client):
        response = client.post(
            "/api/auth/register",
            json={"email": "no-es-correo", "full_name": "X", "password": "parque2024"},
        )
        assert response.status_code == 422


class TestLogin:
    def test_login_returns_token(self, client, citizen, test_password):
        response = client.post(
            "/api/auth/login",
            data={"username": citizen.email, "password": test_password},
        )

        assert response.status_code == 200
        assert response.json()["token_type"] == "bearer"

    def test_wrong_password_is_unauthorized(self, client, citizen):
        response = client.post(
            "/api/auth/login",
            data={"username": citizen.email, "password": "incorrecta1"},
        )

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_login_is_rate_limited(self, client, citizen):
        for _ in range(5):
            client.post(
                "/api/auth/login",
                data={"username": citizen.email, "password": "incorrecta1"},
            )
        response = client.post(
            "/api/auth/login",
            data={"username": citizen.email, "password": "incorrecta1"},
        )
        assert response.status_code == 429


class TestSession:
    def test_me_restores_session(self, client, citizen, auth_headers):
        response = client.get("/api/auth/me", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == citizen.id
        assert data["email"] == citizen.email
        assert data["full_name"] == citizen.full_name

    def test_me_without_token_is_null(self, client):
        response = client.get("/api/auth/me")

        assert response.status_code == 200
        assert response.json() is None

    def test_me_with_bad_token_is_unauthorized(self, client):
        response = client.get(
            "/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"}
        )
        assert response.status_code == 401

    def test_me_for_deactivated_profile_is_forbidden(
        self, client, db_session, citizen, auth_headers
    ):
        citizen.is_active = False
        db_session.commit()

        response = client.get("/api/auth/me", headers=auth_headers)

        assert response.status_code == 403
        assert response.json()["type"] == "InactiveUserException"

    def test_logout_revokes_token(self, client, auth_headers):
        assert client.post("/api/auth/logout", headers=auth_headers).status_code == 200

        response = client.get("/api/auth/me", headers=auth_headers)
        assert response.status_code == 401

    def test_inactive_profile_is_forbidden(self, client, db_session, citizen, auth_headers):
        citizen.is_active = False
        db_session.commit()

        response = client.get("/api/reports/", headers=auth_headers)
        assert response.status_code == 403


class TestHealth:
    def test_health(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_root(self, client):
        assert "EcoCiudad" in client.get("/").json()["message"]
