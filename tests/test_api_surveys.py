from __future__ import annotations

API = "/api/v1"


def _create(api_client, headers, client_id, **overrides):
    payload = {"client_id": client_id, "system_name": "ERP", "survey_date": "2024-01-10"}
    payload.update(overrides)
    return api_client.post(f"{API}/surveys", json=payload, headers=headers)


def test_create_update_status_and_history(api_client, make_user, make_client, auth_header):
    user = make_user()
    headers = auth_header(user)
    client = make_client("Bank Hapoalim")

    created = _create(
        api_client,
        headers,
        client.id,
        contacts=[{"first_name": "Avi", "email": "avi@example.com"}, {"first_name": "  "}],
    )
    assert created.status_code == 201
    body = created.json()
    assert body["status"] == "received"
    assert body["status_label"] == "התקבל"
    assert body["client_name"] == "Bank Hapoalim"
    assert body["owner_user_id"] == user.id
    assert len(body["contacts"]) == 1

    moved = api_client.patch(f"{API}/surveys/{body['id']}/status", json={"status": "in_writing"}, headers=headers)
    assert moved.status_code == 200
    assert moved.json()["status"] == "in_writing"

    history = api_client.get(f"{API}/surveys/{body['id']}/history", headers=headers).json()
    status_rows = [item for item in history if item["field_name"] == "status"]
    assert len(status_rows) == 1
    assert (status_rows[0]["old_value"], status_rows[0]["new_value"]) == ("received", "in_writing")


def test_invalid_status_is_rejected_with_field(api_client, make_user, make_client, auth_header):
    headers = auth_header(make_user())
    survey_id = _create(api_client, headers, make_client().id).json()["id"]

    response = api_client.patch(f"{API}/surveys/{survey_id}/status", json={"status": "paused"}, headers=headers)

    assert response.status_code == 422
    assert response.json()["detail"]["field"] == "status"


def test_unknown_client_is_a_validation_error(api_client, make_user, auth_header):
    response = _create(api_client, auth_header(make_user()), 999)
    assert response.status_code == 422
    assert response.json()["detail"]["field"] == "client_id"


def test_surveyor_sees_only_own_surveys(api_client, make_user, make_client, auth_header):
    alice = make_user()
    bob = make_user()
    manager = make_user(role="manager")
    client = make_client()
    for _ in range(3):
        _create(api_client, auth_header(alice), client.id)
    bob_survey = _create(api_client, auth_header(bob), client.id).json()

    assert len(api_client.get(f"{API}/surveys", headers=auth_header(alice)).json()) == 3
    assert len(api_client.get(f"{API}/surveys", headers=auth_header(manager)).json()) == 4
    assert api_client.get(f"{API}/surveys/{bob_survey['id']}", headers=auth_header(alice)).status_code == 404


def test_list_filters_by_status_and_search(api_client, make_user, make_client, auth_header):
    headers = auth_header(make_user(role="admin"))
    client = make_client("Acme")
    first = _create(api_client, headers, client.id, system_name="Payroll").json()
    _create(api_client, headers, client.id, system_name="CRM")
    api_client.patch(f"{API}/surveys/{first['id']}/status", json={"status": "completed"}, headers=headers)

    completed = api_client.get(f"{API}/surveys", params={"status": "completed"}, headers=headers).json()
    assert [item["system_name"] for item in completed] == ["Payroll"]
    searched = api_client.get(f"{API}/surveys", params={"search": "ROLL"}, headers=headers).json()
    assert [item["system_name"] for item in searched] == ["Payroll"]


def test_archive_restore_and_delete(api_client, make_user, make_client, auth_header):
    headers = auth_header(make_user())
    survey_id = _create(api_client, headers, make_client().id).json()["id"]

    assert api_client.delete(f"{API}/surveys/{survey_id}", headers=headers).status_code == 422
    assert api_client.post(f"{API}/surveys/{survey_id}/archive", headers=headers).json()["is_archived"] is True
    assert api_client.get(f"{API}/surveys", headers=headers).json() == []
    archived = api_client.get(f"{API}/surveys", params={"archived": "true"}, headers=headers).json()
    assert [item["id"] for item in archived] == [survey_id]
    assert api_client.delete(f"{API}/surveys/{survey_id}", headers=headers).status_code == 204
    assert api_client.get(f"{API}/surveys/{survey_id}", headers=headers).status_code == 404


def test_comments_appear_in_history(api_client, make_user, make_client, auth_header):
    headers = auth_header(make_user())
    survey_id = _create(api_client, headers, make_client().id).json()["id"]

    response = api_client.post(f"{API}/surveys/{survey_id}/comments", json={"comment": "Waiting on admin"}, headers=headers)

    assert response.status_code == 201
    history = api_client.get(f"{API}/surveys/{survey_id}/history", headers=headers).json()
    assert history[0]["source"] == "comment"
    assert history[0]["comment"] == "Waiting on admin"
