"""Integration tests for incident endpoints"""

import re

import pytest

from conftest import create_incident, incident_payload


@pytest.mark.integration
class TestCreateAndGet:

    def test_round_trip(self, client, officer):
        created = create_incident(client, officer["headers"])

        assert re.fullmatch(r"CR-\d{8}-[0-9A-F]{8}", created["caseNumber"])
        assert created["caseNumber"] != created["id"]
        assert created["status"] == "Open"
        assert created["closingReason"] is None
        assert created["reportedById"] == officer["user"]["id"]
        assert created["reportedBy"] == {
            "id": officer["user"]["id"],
            "name": "R. Rao",
            "badgeId": "OFFICER123",
        }

        response = client.get(f"/api/incidents/{created['id']}", headers=officer["headers"])
        assert response.status_code == 200
        fetched = response.json()
        for field in ("id", "caseNumber", "location", "crimeType", "description", "status", "reportedById"):
            assert fetched[field] == created[field]
        assert fetched["occurredAt"] == "2025-04-19T21:30:00Z"

    def test_offsets_normalised_to_utc(self, client, officer):
        created = create_incident(client, officer["headers"], occurredAt="2025-04-19T21:30:00+05:30")
        assert created["occurredAt"] == "2025-04-19T16:00:00Z"

        fetched = client.get(f"/api/incidents/{created['id']}", headers=officer["headers"]).json()
        assert fetched["occurredAt"] == "2025-04-19T16:00:00Z"
        for field in ("reportedAt", "createdAt", "updatedAt"):
            assert fetched[field].endswith("Z")

    def test_user_timestamps_carry_offset(self, client, officer):
        users = client.get("/api/users").json()
        assert all(u["createdAt"].endswith("Z") for u in users)

    def test_not_a_date(self, client, officer):
        response = client.post(
            "/api/incidents", json=incident_payload(occurredAt="not-a-date"), headers=officer["headers"]
        )
        assert response.status_code == 400
        assert "occurredAt" in response.json()["errors"]

    def test_blank_required_fields(self, client, officer):
        response = client.post(
            "/api/incidents", json=incident_payload(location="  ", crimeType=""), headers=officer["headers"]
        )
        assert response.status_code == 400
        errors = response.json()["errors"]
        assert "location" in errors
        assert "crimeType" in errors

    def test_unknown_status(self, client, officer):
        response = client.post(
            "/api/incidents", json=incident_payload(status="Pending"), headers=officer["headers"]
        )
        assert response.status_code == 400
        assert "status" in response.json()["errors"]

    def test_closing_reason_dropped_unless_closed(self, client, officer):
        created = create_incident(client, officer["headers"], closingReason="Resolved on the spot")
        assert created["closingReason"] is None

        closed = create_incident(client, officer["headers"], status="Closed", closingReason="Resolved on the spot")
        assert closed["status"] == "Closed"
        assert closed["closingReason"] == "Resolved on the spot"

    def test_reporting_for_another_user_requires_admin(self, client, officer, other_officer):
        response = client.post(
            "/api/incidents",
            json=incident_payload(reportedById=other_officer["user"]["id"]),
            headers=officer["headers"],
        )
        assert response.status_code == 403

    def test_admin_reports_for_another_user(self, client, admin, officer):
        created = create_incident(client, admin["headers"], reportedById=officer["user"]["id"])
        assert created["reportedById"] == officer["user"]["id"]

    def test_admin_reports_for_unknown_user(self, client, admin):
        response = client.post(
            "/api/incidents", json=incident_payload(reportedById="no-such-user"), headers=admin["headers"]
        )
        assert response.status_code == 400
        assert "reportedById" in response.json()["errors"]

    def test_get_missing(self, client, officer):
        response = client.get("/api/incidents/no-such-incident", headers=officer["headers"])
        assert response.status_code == 404
        assert "message" in response.json()


@pytest.mark.integration
class TestUpdate:

    def test_partial_update(self, client, officer):
        created = create_incident(client, officer["headers"])
        response = client.patch(
            f"/api/incidents/{created['id']}",
            json={"status": "Under Investigation", "location": "Brodipet 4th Lane, Guntur"},
            headers=officer["headers"],
        )
        assert response.status_code == 200
        updated = response.json()
        assert updated["status"] == "Under Investigation"
        assert updated["location"] == "Brodipet 4th Lane, Guntur"
        assert updated["description"] == created["description"]
        assert updated["caseNumber"] == created["caseNumber"]

    def test_close_and_reopen_clears_reason(self, client, officer):
        created = create_incident(client, officer["headers"])
        url = f"/api/incidents/{created['id']}"

        closed = client.patch(url, json={"status": "Closed", "closingReason": "Suspect apprehended"},
                              headers=officer["headers"]).json()
        assert closed["closingReason"] == "Suspect apprehended"

        reopened = client.patch(url, json={"status": "Open"}, headers=officer["headers"]).json()
        assert reopened["status"] == "Open"
        assert reopened["closingReason"] is None

    def test_reason_ignored_while_open(self, client, officer):
        created = create_incident(client, officer["headers"])
        response = client.patch(
            f"/api/incidents/{created['id']}", json={"closingReason": "Too early"}, headers=officer["headers"]
        )
        assert response.status_code == 200
        assert response.json()["closingReason"] is None

    def test_blank_reason_stored_as_null(self, client, officer):
        created = create_incident(client, officer["headers"], status="Closed", closingReason="Resolved")
        response = client.patch(
            f"/api/incidents/{created['id']}", json={"closingReason": "   "}, headers=officer["headers"]
        )
        assert response.status_code == 200
        assert response.json()["status"] == "Closed"
        assert response.json()["closingReason"] is None

    def test_empty_patch(self, client, officer):
        created = create_incident(client, officer["headers"])
        response = client.patch(f"/api/incidents/{created['id']}", json={}, headers=officer["headers"])
        assert response.status_code == 400
        assert response.json()["message"] == "No valid fields provided for update."

    def test_null_required_field(self, client, officer):
        created = create_incident(client, officer["headers"])
        response = client.patch(
            f"/api/incidents/{created['id']}", json={"location": None}, headers=officer["headers"]
        )
        assert response.status_code == 400
        assert "location" in response.json()["errors"]

    def test_non_owner_cannot_update(self, client, officer, other_officer):
        created = create_incident(client, officer["headers"])
        url = f"/api/incidents/{created['id']}"

        response = client.patch(url, json={"status": "Closed"}, headers=other_officer["headers"])
        assert response.status_code == 403

        unchanged = client.get(url, headers=officer["headers"]).json()
        assert unchanged["status"] == "Open"
        assert unchanged["updatedAt"] == created["updatedAt"]

    def test_admin_can_update(self, client, officer, admin):
        created = create_incident(client, officer["headers"])
        response = client.patch(
            f"/api/incidents/{created['id']}", json={"status": "Under Investigation"}, headers=admin["headers"]
        )
        assert response.status_code == 200
        assert response.json()["reportedById"] == officer["user"]["id"]

    def test_update_missing(self, client, officer):
        response = client.patch("/api/incidents/nope", json={"status": "Closed"}, headers=officer["headers"])
        assert response.status_code == 404


@pytest.mark.integration
class TestDelete:

    def test_delete_twice(self, client, officer):
        created = create_incident(client, officer["headers"])
        url = f"/api/incidents/{created['id']}"

        first = client.delete(url, headers=officer["headers"])
        assert first.status_code == 204
        assert first.content == b""

        assert client.delete(url, headers=officer["headers"]).status_code == 404
        assert client.get(url, headers=officer["headers"]).status_code == 404

    def test_non_owner_then_admin(self, client, officer, other_officer, admin):
        created = create_incident(client, officer["headers"])
        url = f"/api/incidents/{created['id']}"
        client.post(
            f"{url}/evidence",
            json={"description": "Torn receipt", "type": "Physical Item", "storageReference": "locker-7"},
            headers=officer["headers"],
        )

        assert client.delete(url, headers=other_officer["headers"]).status_code == 403
        assert client.get(url, headers=officer["headers"]).status_code == 200

        assert client.delete(url, headers=admin["headers"]).status_code == 204
        assert client.get(f"{url}/evidence", headers=officer["headers"]).status_code == 404


@pytest.mark.integration
class TestList:

    def test_pagination_arithmetic(self, client, officer):
        for i in range(12):
            create_incident(client, officer["headers"], description=f"Incident number {i}")

        response = client.get("/api/incidents?page=3&limit=5", headers=officer["headers"])
        assert response.status_code == 200
        body = response.json()
        assert body["pagination"] == {"currentPage": 3, "totalPages": 3, "totalCount": 12, "limit": 5}
        assert len(body["incidents"]) == 2

    def test_pages_do_not_overlap(self, client, officer):
        for i in range(7):
            create_incident(client, officer["headers"], description=f"Incident number {i}")

        seen = []
        for page in (1, 2):
            body = client.get(f"/api/incidents?page={page}&limit=4", headers=officer["headers"]).json()
            seen.extend(i["id"] for i in body["incidents"])
        assert len(seen) == len(set(seen)) == 7

    def test_empty_list(self, client, officer):
        body = client.get("/api/incidents", headers=officer["headers"]).json()
        assert body["incidents"] == []
        assert body["pagination"] == {"currentPage": 1, "totalPages": 0, "totalCount": 0, "limit": 10}

    def test_limit_clamped(self, client, officer):
        create_incident(client, officer["headers"])
        body = client.get("/api/incidents?limit=500&page=0", headers=officer["headers"]).json()
        assert body["pagination"]["limit"] == 50
        assert body["pagination"]["currentPage"] == 1

    def test_status_filter_and_sort(self, client, officer):
        for location in ("Nallapadu Road", "Brodipet", "Koritepadu"):
            create_incident(client, officer["headers"], location=location, status="Closed")
        create_incident(client, officer["headers"], location="Amaravati Road")

        body = client.get(
            "/api/incidents?status=Closed&sortBy=location&sortOrder=asc", headers=officer["headers"]
        ).json()
        assert [i["location"] for i in body["incidents"]] == ["Brodipet", "Koritepadu", "Nallapadu Road"]
        assert body["pagination"]["totalCount"] == 3

    def test_unknown_status_ignored(self, client, officer):
        create_incident(client, officer["headers"])
        body = client.get("/api/incidents?status=Pending", headers=officer["headers"]).json()
        assert body["pagination"]["totalCount"] == 1

    def test_search(self, client, officer):
        theft = create_incident(client, officer["headers"], crimeType="Vehicle Theft (Motorcycle)")
        create_incident(client, officer["headers"], crimeType="Illegal Parking", description="Blocked gate")

        body = client.get("/api/incidents?searchQuery=THEFT", headers=officer["headers"]).json()
        assert [i["id"] for i in body["incidents"]] == [theft["id"]]

        by_case = client.get(
            f"/api/incidents?searchQuery={theft['caseNumber']}", headers=officer["headers"]
        ).json()
        assert [i["id"] for i in by_case["incidents"]] == [theft["id"]]

    def test_search_wildcards_are_literal(self, client, officer):
        create_incident(client, officer["headers"])
        body = client.get("/api/incidents?searchQuery=%25", headers=officer["headers"]).json()
        assert body["pagination"]["totalCount"] == 0

    def test_list_includes_reporter(self, client, officer):
        create_incident(client, officer["headers"])
        body = client.get("/api/incidents", headers=officer["headers"]).json()
        assert body["incidents"][0]["reportedBy"]["badgeId"] == "OFFICER123"
