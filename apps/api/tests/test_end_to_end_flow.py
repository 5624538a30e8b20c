import pytest

from config import settings


@pytest.mark.asyncio
async def test_instructor_flow_from_login_to_public_share(api_client, make_instructor):
    await make_instructor("coach", "coach-pass-1")

    login = await api_client.post("/auth/login", json={"username": "coach", "password": "coach-pass-1"})
    assert login.status_code == 200
    headers = {"Authorization": f"Bearer {login.json()['accessToken']}"}

    client = await api_client.post(
        "/clients",
        json={"name": "Yoon", "phone": "010-0000-0000", "flagsNote": "left knee"},
        headers=headers,
    )
    assert client.status_code == 201
    client_id = client.json()["id"]
    assert client.json()["flagsNote"] == "left knee"

    renamed = await api_client.patch(f"/clients/{client_id}", json={"note": "prefers mornings"}, headers=headers)
    assert renamed.json()["name"] == "Yoon"
    assert renamed.json()["note"] == "prefers mornings"

    session = await api_client.post(
        "/sessions",
        json={"clientId": client_id, "date": "2026-10-18", "type": "PERSONAL", "startTime": "07:15", "memo": "first"},
        headers=headers,
    )
    assert session.status_code == 201
    session_id = session.json()["id"]

    pending = await api_client.get("/sessions/with-report?date=2026-10-18", headers=headers)
    assert pending.json()[0]["hasReport"] is False

    report = await api_client.post(
        "/reports",
        json={"sessionId": session_id, "summaryItems": "mobility", "homework": "daily stretch"},
        headers=headers,
    )
    assert report.status_code == 201
    report_id = report.json()["id"]
    assert report.json()["clientId"] == client_id

    edited = await api_client.patch(f"/reports/{report_id}", json={"painChange": "less pain"}, headers=headers)
    assert edited.json()["painChange"] == "less pain"
    assert edited.json()["summaryItems"] == "mobility"

    done = await api_client.get("/sessions/with-report?date=2026-10-18", headers=headers)
    assert done.json()[0]["hasReport"] is True

    history = await api_client.get(f"/clients/{client_id}/reports", headers=headers)
    assert [row["id"] for row in history.json()] == [report_id]

    share = await api_client.post(f"/reports/{report_id}/share", json={"expireHours": 48}, headers=headers)
    assert share.status_code == 200
    token = share.json()["token"]
    assert share.json()["shareUrl"].startswith(settings.SHARE_BASE_URL.rstrip("/"))

    opened = await api_client.get(f"/share/{token}")
    assert opened.status_code == 200
    body = opened.json()
    assert body["viewCount"] == 1
    assert body["clientName"] == "Yoon"
    assert body["sessionStartTime"] == "07:15"
    assert body["homework"] == "daily stretch"
    assert body["painChange"] == "less pain"
    assert body["photos"] == []


@pytest.mark.asyncio
async def test_homework_endpoints(api_client, make_instructor):
    _instructor_id, headers = await make_instructor("coach")
    client = await api_client.post("/clients", json={"name": "Han"}, headers=headers)
    client_id = client.json()["id"]

    created = await api_client.post(
        f"/clients/{client_id}/homeworks",
        json={"content": "foam roll 5 min", "remindAt": "2026-10-19T09:00:00Z"},
        headers=headers,
    )
    blank = await api_client.post(f"/clients/{client_id}/homeworks", json={"content": "  "}, headers=headers)
    listed = await api_client.get(f"/clients/{client_id}/homeworks", headers=headers)

    assert created.status_code == 201
    assert created.json()["completed"] is False
    assert created.json()["notifiedAt"] is None
    assert blank.status_code == 400
    assert [row["content"] for row in listed.json()] == ["foam roll 5 min"]
