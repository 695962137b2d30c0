from roomierules.models.house_context import HouseContext
from roomierules.models.house_rule import HouseRule
from roomierules.models.role import UserRole
from tests.conftest import create_user, headers_for


def post_rule(client, headers, title="Quiet after 22:00", description="Weeknights only"):
    return client.post(
        "/api/house-rules",
        headers=headers,
        json={"title": title, "description": description},
    )


class TestCreateRule:
    """Tests for POST /api/house-rules"""

    def test_host_creates_rule(self, client, host, house, host_headers):
        response = post_rule(client, host_headers, title="  Quiet after 22:00  ")

        assert response.status_code == 201
        rule = response.json()["data"]["rule"]
        assert rule["title"] == "Quiet after 22:00"
        assert rule["description"] == "Weeknights only"
        assert rule["house_id"] == house.id
        assert rule["created_by"] == host.id

    def test_roommate_cannot_create(self, client, db_session, roommate_headers):
        response = post_rule(client, roommate_headers)

        assert response.status_code == 403
        assert response.json()["error"] == "Only house hosts can create rules"
        assert db_session.query(HouseRule).count() == 0

    def test_blank_title(self, client, host_headers):
        response = post_rule(client, host_headers, title="   ")

        assert response.status_code == 400
        assert response.json()["error"] == "Rule title is required"

    def test_blank_description_stored_as_null(self, client, host_headers):
        response = post_rule(client, host_headers, description="  ")

        assert response.json()["data"]["rule"]["description"] is None

    def test_without_house(self, client, db_session):
        loner = create_user(db_session, "Lonely")

        response = post_rule(client, headers_for(loner))

        assert response.status_code == 400
        assert response.json()["error"] == "User is not part of any house"


class TestReadRules:
    """Tests for GET /api/house-rules and GET /api/house-rules/{rule_id}"""

    def test_members_list_rules(self, client, host_headers, roommate_headers):
        post_rule(client, host_headers, title="Quiet after 22:00")
        post_rule(client, host_headers, title="Dishes same day")

        response = client.get("/api/house-rules", headers=roommate_headers)

        assert response.status_code == 200
        assert [r["title"] for r in response.json()["data"]["rules"]] == [
            "Dishes same day",
            "Quiet after 22:00",
        ]

    def test_member_gets_rule(self, client, host_headers, roommate_headers):
        rule_id = post_rule(client, host_headers).json()["data"]["rule"]["id"]

        response = client.get(f"/api/house-rules/{rule_id}", headers=roommate_headers)

        assert response.status_code == 200
        assert response.json()["data"]["rule"]["id"] == rule_id

    def test_outsider_denied(self, client, host_headers, outsider):
        rule_id = post_rule(client, host_headers).json()["data"]["rule"]["id"]

        response = client.get(f"/api/house-rules/{rule_id}", headers=headers_for(outsider))

        assert response.status_code == 403

    def test_not_found(self, client, host_headers):
        response = client.get("/api/house-rules/404", headers=host_headers)

        assert response.status_code == 404
        assert response.json()["error"] == "House rule not found"


class TestUpdateAndDeleteRule:
    """Tests for PUT and DELETE /api/house-rules/{rule_id}"""

    def test_host_updates_rule(self, client, host_headers):
        rule_id = post_rule(client, host_headers).json()["data"]["rule"]["id"]

        response = client.put(
            f"/api/house-rules/{rule_id}",
            headers=host_headers,
            json={"title": "Quiet after 23:00"},
        )

        assert response.status_code == 200
        rule = response.json()["data"]["rule"]
        assert rule["title"] == "Quiet after 23:00"
        assert rule["description"] == "Weeknights only"

    def test_empty_title_rejected(self, client, host_headers):
        rule_id = post_rule(client, host_headers).json()["data"]["rule"]["id"]

        response = client.put(f"/api/house-rules/{rule_id}", headers=host_headers, json={"title": ""})

        assert response.status_code == 400
        assert response.json()["error"] == "Rule title cannot be empty"

    def test_roommate_cannot_update(self, client, host_headers, roommate_headers):
        rule_id = post_rule(client, host_headers).json()["data"]["rule"]["id"]

        response = client.put(f"/api/house-rules/{rule_id}", headers=roommate_headers, json={"title": "No rules"})

        assert response.status_code == 403
        assert response.json()["error"] == "Only the house host can update rules"

    def test_host_deletes_rule(self, client, db_session, host_headers):
        rule_id = post_rule(client, host_headers).json()["data"]["rule"]["id"]

        response = client.delete(f"/api/house-rules/{rule_id}", headers=host_headers)

        assert response.status_code == 200
        assert response.json()["data"]["message"] == "House rule deleted successfully"
        assert db_session.query(HouseRule).count() == 0

    def test_roommate_cannot_delete(self, client, db_session, host_headers, roommate_headers):
        rule_id = post_rule(client, host_headers).json()["data"]["rule"]["id"]

        response = client.delete(f"/api/house-rules/{rule_id}", headers=roommate_headers)

        assert response.status_code == 403
        assert response.json()["error"] == "Only the house host can delete rules"
        assert db_session.query(HouseRule).count() == 1


class TestHouseContext:
    """Only the house's own host may write rules, not any user with the host role"""

    def test_host_owns_house(self, host, house):
        assert HouseContext(user=host, house=house).owns_house() is True

    def test_roommate_does_not_own_house(self, roommate, house):
        assert HouseContext(user=roommate, house=house).owns_house() is False

    def test_other_host_does_not_own_house(self, db_session, house):
        other_host = create_user(db_session, "Otto", role=UserRole.HOST)

        context = HouseContext(user=other_host, house=house)

        assert other_host.is_host is True
        assert context.owns_house() is False
