"""Integration tests for /api/rewards endpoints."""


def _give_points(db_session, profile, points):
    profile.points = points
    db_session.commit()


class TestRewardsRouter:
    def test_catalog_hides_inactive_rewards(
        self, client, auth_headers, test_reward, inactive_reward
    ):
        response = client.get("/api/rewards/", headers=auth_headers)

        assert response.status_code == 200
        assert [r["id"] for r in response.json()] == [test_reward.id]

    def test_redeem(self, client, db_session, citizen, auth_headers, test_reward):
        _give_points(db_session, citizen, 75)

        response = client.post(f"/api/rewards/{test_reward.id}/redeem", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["remaining_points"] == 25
        assert data["redemption"]["points_spent"] == 50
        assert data["redemption"]["status"] == "pendiente"

        mine = client.get("/api/rewards/mine", headers=auth_headers).json()
        assert mine[0]["reward"]["title"] == test_reward.title

    def test_insufficient_points(self, client, db_session, citizen, auth_headers, test_reward):
        _give_points(db_session, citizen, 10)

        response = client.post(f"/api/rewards/{test_reward.id}/redeem", headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["type"] == "InsufficientPointsException"
        db_session.refresh(citizen)
        assert citizen.points == 10

    def test_inactive_reward(self, client, db_session, citizen, auth_headers, inactive_reward):
        _give_points(db_session, citizen, 100)

        response = client.post(
            f"/api/rewards/{inactive_reward.id}/redeem", headers=auth_headers
        )

        assert response.status_code == 400
        assert response.json()["type"] == "InactiveRewardException"

    def test_unknown_reward(self, client, auth_headers):
        assert client.post("/api/rewards/99999/redeem", headers=auth_headers).status_code == 404

    def test_activity_history(self, client, auth_headers):
        client.post(
            "/api/reports/",
            json={
                "title": "Árbol caído",
                "description": "Bloquea la banqueta",
                "category": "tala_ilegal",
                "latitude": 19.0,
                "longitude": -98.2,
            },
            headers=auth_headers,
        )

        activities = client.get("/api/rewards/activities", headers=auth_headers).json()

        assert len(activities) == 1
        assert activities[0]["activity_type"] == "reporte_valido"
        assert activities[0]["points_earned"] == 10
        assert activities[0]["report_id"] is not None
