"""HTTP tests for the houses, tasks and categories endpoints."""

import pytest


def _create_house(client, headers, name: str = "Family Home", display_name: str = "Dad") -> dict:
    response = client.post("/houses", json={"name": name, "display_name": display_name}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def _join(client, owner_headers, house_id: str, member_headers, display_name: str) -> dict:
    response = client.post(
        f"/houses/{house_id}/members",
        json={"user_id": member_headers["X-User-Id"], "display_name": display_name},
        headers=owner_headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.integration
class TestHealthAndAuth:
    """Tests for the health check and caller identification."""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_missing_user_header_is_unauthorized(self, client):
        assert client.get("/houses").status_code == 401

    def test_current_user(self, client, register):
        headers = register("Alice")

        response = client.get("/users/me", headers=headers)

        assert response.status_code == 200
        assert response.json()["email"] == "alice@example.com"


@pytest.mark.integration
class TestHouseEndpoints:
    """Tests for house and membership endpoints."""

    def test_create_and_list_houses(self, client, register):
        dad = register("Dad")
        house = _create_house(client, dad)

        response = client.get("/houses", headers=dad)

        assert response.status_code == 200
        houses = response.json()
        assert [h["id"] for h in houses] == [house["id"]]
        assert houses[0]["member_info"]["role"] == "OWNER"

    def test_invalid_house_name_is_rejected(self, client, register):
        dad = register("Dad")

        response = client.post("/houses", json={"name": "x", "display_name": "Dad"}, headers=dad)

        assert response.status_code == 422

    def test_non_member_cannot_read_house(self, client, register):
        dad = register("Dad")
        stranger = register("Stranger")
        house = _create_house(client, dad)

        response = client.get(f"/houses/{house['id']}", headers=stranger)

        assert response.status_code == 403
        assert response.json()["code"] == "ERR_FORBIDDEN"

    def test_member_cannot_update_house(self, client, register):
        dad = register("Dad")
        mom = register("Mom")
        house = _create_house(client, dad)
        _join(client, dad, house["id"], mom, "Mom")

        response = client.put(f"/houses/{house['id']}", json={"name": "Renamed"}, headers=mom)

        assert response.status_code == 403

    def test_duplicate_display_name_is_conflict(self, client, register):
        dad = register("Dad")
        mom = register("Mom")
        house = _create_house(client, dad)

        response = client.post(
            f"/houses/{house['id']}/members",
            json={"user_id": mom["X-User-Id"], "display_name": "Dad"},
            headers=dad,
        )

        assert response.status_code == 409
        assert response.json()["fields"] == {"display_name": "already taken"}

    def test_removing_last_owner_is_unprocessable(self, client, register):
        dad = register("Dad")
        house = _create_house(client, dad)

        response = client.delete(f"/houses/{house['id']}/members/{dad['X-User-Id']}", headers=dad)

        assert response.status_code == 422
        assert response.json() == {
            "code": "ERR_BUSINESS_RULE",
            "message": "Cannot remove the last owner of the house",
        }

    def test_promote_then_demote(self, client, register):
        dad = register("Dad")
        mom = register("Mom")
        house = _create_house(client, dad)
        _join(client, dad, house["id"], mom, "Mom")

        promoted = client.put(
            f"/houses/{house['id']}/members/{mom['X-User-Id']}/role", json={"role": "OWNER"}, headers=dad
        )
        demoted = client.put(
            f"/houses/{house['id']}/members/{dad['X-User-Id']}/role", json={"role": "MEMBER"}, headers=mom
        )

        assert promoted.status_code == 200
        assert demoted.status_code == 200
        assert demoted.json()["role"] == "MEMBER"

    def test_null_house_name_is_rejected(self, client, register):
        dad = register("Dad")
        house = _create_house(client, dad)

        response = client.put(f"/houses/{house['id']}", json={"name": None}, headers=dad)

        assert response.status_code == 422
        assert client.get(f"/houses/{house['id']}", headers=dad).json()["name"] == "Family Home"

    def test_rename_self(self, client, register):
        dad = register("Dad")
        house = _create_house(client, dad)

        response = client.put(f"/houses/{house['id']}/display-name", json={"display_name": "Papa"}, headers=dad)

        assert response.status_code == 200
        assert response.json()["display_name"] == "Papa"

    def test_delete_house(self, client, register):
        dad = register("Dad")
        house = _create_house(client, dad)

        assert client.delete(f"/houses/{house['id']}", headers=dad).status_code == 204
        assert client.get("/houses", headers=dad).json() == []


@pytest.mark.integration
class TestTaskEndpoints:
    """Tests for task endpoints."""

    def test_household_scenario(self, client, register):
        """Test an assignee completes a task, then leaves the house, leaving it unassigned."""
        dad = register("Dad")
        mom = register("Mom")
        house = _create_house(client, dad)
        house_id = house["id"]
        mom_member = _join(client, dad, house_id, mom, "Mom")

        created = client.post(
            f"/houses/{house_id}/tasks",
            json={"title": "Mow the lawn", "priority": "HIGH", "assignee_ids": [mom_member["id"]]},
            headers=dad,
        )
        assert created.status_code == 201, created.text
        task_id = created.json()["id"]

        completed = client.put(f"/houses/{house_id}/tasks/{task_id}/status", json={"status": "COMPLETED"}, headers=mom)
        assert completed.status_code == 200
        assert completed.json()["completed_at"] is not None

        removed = client.delete(f"/houses/{house_id}/members/{mom['X-User-Id']}", headers=dad)
        assert removed.status_code == 204

        task = client.get(f"/houses/{house_id}/tasks/{task_id}", headers=dad).json()
        assert task["assignees"] == []

    def test_list_with_filters_and_pagination(self, client, register):
        dad = register("Dad")
        house_id = _create_house(client, dad)["id"]
        for i in range(3):
            client.post(f"/houses/{house_id}/tasks", json={"title": f"Task {i}"}, headers=dad)
        client.post(f"/houses/{house_id}/tasks", json={"title": "Urgent", "priority": "HIGH"}, headers=dad)

        response = client.get(f"/houses/{house_id}/tasks", params={"limit": 2, "page": 1}, headers=dad)
        high_only = client.get(f"/houses/{house_id}/tasks", params={"priority": "HIGH"}, headers=dad)

        assert response.status_code == 200
        body = response.json()
        assert body["tasks"][0]["title"] == "Urgent"
        assert body["pagination"] == {"page": 1, "limit": 2, "total": 4, "pages": 2}
        assert [t["title"] for t in high_only.json()["tasks"]] == ["Urgent"]

    def test_assignee_cannot_delete(self, client, register):
        dad = register("Dad")
        mom = register("Mom")
        house_id = _create_house(client, dad)["id"]
        mom_member = _join(client, dad, house_id, mom, "Mom")
        task_id = client.post(
            f"/houses/{house_id}/tasks",
            json={"title": "Dishes", "assignee_ids": [mom_member["id"]]},
            headers=dad,
        ).json()["id"]

        response = client.delete(f"/houses/{house_id}/tasks/{task_id}", headers=mom)

        assert response.status_code == 403
        assert client.delete(f"/houses/{house_id}/tasks/{task_id}", headers=dad).status_code == 204

    def test_partial_update_clears_description(self, client, register):
        dad = register("Dad")
        house_id = _create_house(client, dad)["id"]
        task_id = client.post(
            f"/houses/{house_id}/tasks",
            json={"title": "Dishes", "description": "After dinner"},
            headers=dad,
        ).json()["id"]

        response = client.put(f"/houses/{house_id}/tasks/{task_id}", json={"description": None}, headers=dad)

        assert response.status_code == 200
        assert response.json()["description"] is None
        assert response.json()["title"] == "Dishes"

    def test_replace_assignees(self, client, register):
        dad = register("Dad")
        mom = register("Mom")
        house_id = _create_house(client, dad)["id"]
        mom_member = _join(client, dad, house_id, mom, "Mom")
        task_id = client.post(f"/houses/{house_id}/tasks", json={"title": "Dishes"}, headers=dad).json()["id"]

        assigned = client.put(
            f"/houses/{house_id}/tasks/{task_id}/assignees",
            json={"assignee_ids": [mom_member["id"]]},
            headers=dad,
        )
        mine = client.get(f"/houses/{house_id}/tasks", params={"assigned_to_me": "true"}, headers=mom)

        assert assigned.status_code == 200
        assert [a["display_name"] for a in assigned.json()["assignees"]] == ["Mom"]
        assert [t["id"] for t in mine.json()["tasks"]] == [task_id]

    def test_repeated_assignees_are_unprocessable(self, client, register):
        dad = register("Dad")
        mom = register("Mom")
        house_id = _create_house(client, dad)["id"]
        mom_member = _join(client, dad, house_id, mom, "Mom")

        response = client.post(
            f"/houses/{house_id}/tasks",
            json={"title": "Dishes", "assignee_ids": [mom_member["id"]] * 11},
            headers=dad,
        )

        assert response.status_code == 422
        assert response.json()["code"] == "ERR_BUSINESS_RULE"
        assert client.get(f"/houses/{house_id}/tasks", headers=dad).json()["pagination"]["total"] == 0

    def test_past_due_date_is_unprocessable(self, client, register):
        dad = register("Dad")
        house_id = _create_house(client, dad)["id"]

        response = client.post(
            f"/houses/{house_id}/tasks",
            json={"title": "Dishes", "due_date": "2020-01-01T00:00:00Z"},
            headers=dad,
        )

        assert response.status_code == 422

    def test_task_from_other_house_is_not_found(self, client, register):
        dad = register("Dad")
        house_a = _create_house(client, dad, name="House A")["id"]
        house_b = _create_house(client, dad, name="House B")["id"]
        task_id = client.post(f"/houses/{house_a}/tasks", json={"title": "Dishes"}, headers=dad).json()["id"]

        response = client.get(f"/houses/{house_b}/tasks/{task_id}", headers=dad)

        assert response.status_code == 404
        assert response.json()["code"] == "ERR_NOT_FOUND"


@pytest.mark.integration
class TestCategoryEndpoints:
    """Tests for category endpoints."""

    def test_create_list_and_delete(self, client, register):
        dad = register("Dad")
        house_id = _create_house(client, dad)["id"]

        created = client.post(f"/houses/{house_id}/categories", json={"name": "Garden"}, headers=dad)
        duplicate = client.post(f"/houses/{house_id}/categories", json={"name": "Garden"}, headers=dad)
        listed = client.get(f"/houses/{house_id}/categories", headers=dad)

        assert created.status_code == 201
        assert duplicate.status_code == 409
        assert [c["name"] for c in listed.json()] == ["Garden"]

        deleted = client.delete(f"/houses/{house_id}/categories/{created.json()['id']}", headers=dad)
        assert deleted.status_code == 204
