"""Integration tests for /api/education endpoints."""


class TestEducationRouter:
    def test_list_published(self, client, auth_headers, test_content, draft_content):
        response = client.get("/api/education/", headers=auth_headers)

        assert response.status_code == 200
        items = response.json()
        assert [i["id"] for i in items] == [test_content.id]
        assert items[0]["likes"] == 0
        assert items[0]["viewed_by_me"] is False

    def test_view_credits_once(self, client, db_session, citizen, auth_headers, test_content):
        first = client.post(f"/api/education/{test_content.id}/view", headers=auth_headers)
        second = client.post(f"/api/education/{test_content.id}/view", headers=auth_headers)

        assert first.json() == {"first_view": True, "views": 1, "points_awarded": 5}
        assert second.json() == {"first_view": False, "views": 1, "points_awarded": 0}
        db_session.refresh(citizen)
        assert citizen.points == 5

    def test_draft_is_not_found(self, client, auth_headers, draft_content):
        response = client.post(f"/api/education/{draft_content.id}/view", headers=auth_headers)
        assert response.status_code == 404

    def test_like_toggle(self, client, auth_headers, test_content):
        liked = client.post(f"/api/education/{test_content.id}/like", headers=auth_headers)
        unliked = client.post(f"/api/education/{test_content.id}/like", headers=auth_headers)

        assert liked.json() == {"liked": True, "likes": 1}
        assert unliked.json() == {"liked": False, "likes": 0}

    def test_complete(self, client, auth_headers, test_content):
        response = client.post(
            f"/api/education/{test_content.id}/complete", headers=auth_headers
        )
        assert response.json() == {"completed": True}
