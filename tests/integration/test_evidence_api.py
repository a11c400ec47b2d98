"""Integration tests for evidence endpoints"""

import pytest

from conftest import create_incident


def evidence_payload(**overrides):
    payload = {
        "description": "CCTV still of the suspect leaving the shop",
        "type": "Photo",
        "storageReference": "evidence-locker/2025/04/cctv-0419-1.jpg",
    }
    payload.update(overrides)
    return payload


def add_evidence(client, incident_id, headers, **overrides):
    response = client.post(
        f"/api/incidents/{incident_id}/evidence", json=evidence_payload(**overrides), headers=headers
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.integration
class TestAddAndList:

    def test_add(self, client, officer, other_officer):
        incident = create_incident(client, officer["headers"])
        evidence = add_evidence(client, incident["id"], other_officer["headers"])

        assert evidence["incidentId"] == incident["id"]
        assert evidence["type"] == "Photo"
        assert evidence["addedById"] == other_officer["user"]["id"]
        assert evidence["addedBy"]["badgeId"] == "OFFICER456"

    def test_list_oldest_first(self, client, officer):
        incident = create_incident(client, officer["headers"])
        added = [
            add_evidence(client, incident["id"], officer["headers"], description=f"Item {i}")
            for i in range(3)
        ]

        response = client.get(f"/api/incidents/{incident['id']}/evidence", headers=officer["headers"])
        assert response.status_code == 200
        listed = response.json()
        assert {e["id"] for e in listed} == {e["id"] for e in added}
        created_times = [e["createdAt"] for e in listed]
        assert created_times == sorted(created_times)
        assert all(e["addedBy"]["name"] == "R. Rao" for e in listed)

    def test_list_scoped_to_incident(self, client, officer):
        first = create_incident(client, officer["headers"])
        second = create_incident(client, officer["headers"])
        add_evidence(client, first["id"], officer["headers"])

        response = client.get(f"/api/incidents/{second['id']}/evidence", headers=officer["headers"])
        assert response.json() == []

    def test_missing_incident(self, client, officer):
        response = client.get("/api/incidents/nope/evidence", headers=officer["headers"])
        assert response.status_code == 404

        response = client.post("/api/incidents/nope/evidence", json=evidence_payload(), headers=officer["headers"])
        assert response.status_code == 404

    def test_invalid_type(self, client, officer):
        incident = create_incident(client, officer["headers"])
        response = client.post(
            f"/api/incidents/{incident['id']}/evidence",
            json=evidence_payload(type="Hologram"),
            headers=officer["headers"],
        )
        assert response.status_code == 400
        assert "type" in response.json()["errors"]

    def test_blank_storage_reference(self, client, officer):
        incident = create_incident(client, officer["headers"])
        response = client.post(
            f"/api/incidents/{incident['id']}/evidence",
            json=evidence_payload(storageReference=" "),
            headers=officer["headers"],
        )
        assert response.status_code == 400
        assert "storageReference" in response.json()["errors"]

    def test_requires_token(self, client, officer):
        incident = create_incident(client, officer["headers"])
        assert client.get(f"/api/incidents/{incident['id']}/evidence").status_code == 401


@pytest.mark.integration
class TestDelete:

    def test_adder_deletes(self, client, officer):
        incident = create_incident(client, officer["headers"])
        evidence = add_evidence(client, incident["id"], officer["headers"])
        url = f"/api/incidents/{incident['id']}/evidence/{evidence['id']}"

        assert client.delete(url, headers=officer["headers"]).status_code == 204
        assert client.delete(url, headers=officer["headers"]).status_code == 404

    def test_non_adder_forbidden(self, client, officer, other_officer):
        incident = create_incident(client, officer["headers"])
        evidence = add_evidence(client, incident["id"], other_officer["headers"])

        # Owning the incident does not grant rights over someone else's evidence
        response = client.delete(
            f"/api/incidents/{incident['id']}/evidence/{evidence['id']}", headers=officer["headers"]
        )
        assert response.status_code == 403

        listed = client.get(f"/api/incidents/{incident['id']}/evidence", headers=officer["headers"]).json()
        assert [e["id"] for e in listed] == [evidence["id"]]

    def test_admin_deletes(self, client, officer, admin):
        incident = create_incident(client, officer["headers"])
        evidence = add_evidence(client, incident["id"], officer["headers"])
        response = client.delete(
            f"/api/incidents/{incident['id']}/evidence/{evidence['id']}", headers=admin["headers"]
        )
        assert response.status_code == 204

    def test_wrong_incident_in_path(self, client, officer):
        first = create_incident(client, officer["headers"])
        second = create_incident(client, officer["headers"])
        evidence = add_evidence(client, first["id"], officer["headers"])

        response = client.delete(
            f"/api/incidents/{second['id']}/evidence/{evidence['id']}", headers=officer["headers"]
        )
        assert response.status_code == 400

        listed = client.get(f"/api/incidents/{first['id']}/evidence", headers=officer["headers"]).json()
        assert len(listed) == 1

    def test_removed_with_incident(self, client, officer):
        incident = create_incident(client, officer["headers"])
        evidence = add_evidence(client, incident["id"], officer["headers"])

        assert client.delete(f"/api/incidents/{incident['id']}", headers=officer["headers"]).status_code == 204

        response = client.delete(
            f"/api/incidents/{incident['id']}/evidence/{evidence['id']}", headers=officer["headers"]
        )
        assert response.status_code == 404
