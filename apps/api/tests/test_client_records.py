from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import update

from models.report_share import ReportShare


JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x02" * 48
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x03" * 48


async def _create_client(api_client, headers, name="Seo"):
    response = await api_client.post("/clients", json={"name": name}, headers=headers)
    assert response.status_code == 201
    return response.json()["id"]


async def _upload_progress_photo(api_client, headers, client_id, *, phase="BEFORE", data=JPEG_BYTES):
    return await api_client.post(
        f"/clients/{client_id}/progress-photos",
        files={"file": ("posture.jpg", data, "image/jpeg")},
        data={"phase": phase, "note": "standing, side view", "takenOn": "2026-10-01"},
        headers=headers,
    )


async def _share_report_for(api_client, headers, client_id):
    session = await api_client.post(
        "/sessions",
        json={"clientId": client_id, "date": "2026-10-18", "type": "PERSONAL"},
        headers=headers,
    )
    report = await api_client.post("/reports", json={"sessionId": session.json()["id"]}, headers=headers)
    share = await api_client.post(f"/reports/{report.json()['id']}/share", headers=headers)
    return share.json()["token"]


@pytest.mark.asyncio
async def test_profile_is_blank_until_saved_then_replaced(api_client, make_instructor):
    _instructor_id, headers = await make_instructor("coach")
    client_id = await _create_client(api_client, headers)

    blank = await api_client.get(f"/clients/{client_id}/profile", headers=headers)
    assert blank.status_code == 200
    assert blank.json()["clientId"] == client_id
    assert blank.json()["painNote"] is None

    saved = await api_client.put(
        f"/clients/{client_id}/profile",
        json={"painNote": "lower back", "goalNote": "run 10k"},
        headers=headers,
    )
    assert saved.status_code == 200
    assert saved.json()["painNote"] == "lower back"

    replaced = await api_client.put(
        f"/clients/{client_id}/profile",
        json={"goalNote": "run a half marathon"},
        headers=headers,
    )
    fetched = await api_client.get(f"/clients/{client_id}/profile", headers=headers)

    assert replaced.json()["goalNote"] == "run a half marathon"
    assert fetched.json()["painNote"] is None
    assert fetched.json()["goalNote"] == "run a half marathon"


@pytest.mark.asyncio
async def test_profile_rejects_oversized_notes(api_client, make_instructor):
    _instructor_id, headers = await make_instructor("coach")
    client_id = await _create_client(api_client, headers)

    response = await api_client.put(
        f"/clients/{client_id}/profile",
        json={"painNote": "x" * 1001},
        headers=headers,
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_tracking_logs_are_created_and_listed(api_client, make_instructor):
    _instructor_id, headers = await make_instructor("coach")
    client_id = await _create_client(api_client, headers)

    first = await api_client.post(
        f"/clients/{client_id}/tracking-logs",
        json={"painNote": "knee 6/10", "homeworkGiven": "wall sit", "homeworkReminderAt": "2026-10-20T08:00:00Z"},
        headers=headers,
    )
    assert first.status_code == 201
    assert first.json()["homeworkGiven"] == "wall sit"
    assert first.json()["homeworkReminderAt"] is not None

    second = await api_client.post(
        f"/clients/{client_id}/tracking-logs",
        json={"painNote": "knee 3/10"},
        headers=headers,
    )
    listed = await api_client.get(f"/clients/{client_id}/tracking-logs", headers=headers)

    assert second.status_code == 201
    assert {row["painNote"] for row in listed.json()} == {"knee 6/10", "knee 3/10"}
    assert len(listed.json()) == 2


@pytest.mark.asyncio
async def test_progress_photo_upload_list_and_fetch(api_client, make_instructor):
    _instructor_id, headers = await make_instructor("coach")
    client_id = await _create_client(api_client, headers)

    upload = await _upload_progress_photo(api_client, headers, client_id)
    assert upload.status_code == 201
    body = upload.json()
    assert body["phase"] == "BEFORE"
    assert body["takenOn"] == "2026-10-01"
    assert body["note"] == "standing, side view"
    assert body["imageUrl"] == f"/clients/{client_id}/progress-photos/{body['id']}"

    listed = await api_client.get(f"/clients/{client_id}/progress-photos", headers=headers)
    fetched = await api_client.get(body["imageUrl"], headers=headers)

    assert [row["id"] for row in listed.json()] == [body["id"]]
    assert fetched.status_code == 200
    assert fetched.content == JPEG_BYTES
    assert fetched.headers["content-type"] == "image/jpeg"


@pytest.mark.asyncio
async def test_progress_photo_validation(api_client, make_instructor):
    _instructor_id, headers = await make_instructor("coach")
    client_id = await _create_client(api_client, headers)

    bad_phase = await _upload_progress_photo(api_client, headers, client_id, phase="DURING")
    empty = await _upload_progress_photo(api_client, headers, client_id, data=b"")
    not_image = await api_client.post(
        f"/clients/{client_id}/progress-photos",
        files={"file": ("notes.txt", b"text", "text/plain")},
        headers=headers,
    )
    default_phase = await api_client.post(
        f"/clients/{client_id}/progress-photos",
        files={"file": ("p.png", PNG_BYTES, "image/png")},
        headers=headers,
    )

    assert bad_phase.status_code == 400
    assert empty.status_code == 400
    assert not_image.status_code == 400
    assert default_phase.status_code == 201
    assert default_phase.json()["phase"] == "ETC"


@pytest.mark.asyncio
async def test_client_records_are_owner_scoped(api_client, make_instructor):
    _owner_id, owner = await make_instructor("owner")
    _intruder_id, intruder = await make_instructor("intruder")
    client_id = await _create_client(api_client, owner)
    await api_client.put(f"/clients/{client_id}/profile", json={"painNote": "neck"}, headers=owner)
    photo_id = (await _upload_progress_photo(api_client, owner, client_id)).json()["id"]

    attempts = [
        api_client.get(f"/clients/{client_id}/profile", headers=intruder),
        api_client.put(f"/clients/{client_id}/profile", json={"painNote": "none"}, headers=intruder),
        api_client.get(f"/clients/{client_id}/tracking-logs", headers=intruder),
        api_client.post(f"/clients/{client_id}/tracking-logs", json={"painNote": "x"}, headers=intruder),
        api_client.get(f"/clients/{client_id}/progress-photos", headers=intruder),
        api_client.get(f"/clients/{client_id}/progress-photos/{photo_id}", headers=intruder),
        _upload_progress_photo(api_client, intruder, client_id),
    ]
    for attempt in attempts:
        response = await attempt
        assert response.status_code == 404, response.text

    profile = await api_client.get(f"/clients/{client_id}/profile", headers=owner)
    photos = await api_client.get(f"/clients/{client_id}/progress-photos", headers=owner)
    assert profile.json()["painNote"] == "neck"
    assert len(photos.json()) == 1


@pytest.mark.asyncio
async def test_share_snapshot_lists_progress_photos(api_client, make_instructor):
    _instructor_id, headers = await make_instructor("coach")
    client_id = await _create_client(api_client, headers)
    photo_id = (await _upload_progress_photo(api_client, headers, client_id, phase="AFTER")).json()["id"]
    token = await _share_report_for(api_client, headers, client_id)

    snapshot = (await api_client.get(f"/share/{token}")).json()

    assert len(snapshot["progressPhotos"]) == 1
    shared = snapshot["progressPhotos"][0]
    assert shared["id"] == photo_id
    assert shared["phase"] == "AFTER"
    assert shared["takenOn"] == "2026-10-01"
    assert shared["imageUrl"] == f"/share/{token}/client-photos/{photo_id}"

    fetched = await api_client.get(shared["imageUrl"])
    assert fetched.status_code == 200
    assert fetched.content == JPEG_BYTES
    assert fetched.headers["cache-control"] == "no-store"


@pytest.mark.asyncio
async def test_share_snapshot_caps_progress_photos(api_client, make_instructor):
    _instructor_id, headers = await make_instructor("coach")
    client_id = await _create_client(api_client, headers)
    for _ in range(14):
        await _upload_progress_photo(api_client, headers, client_id)
    token = await _share_report_for(api_client, headers, client_id)

    snapshot = (await api_client.get(f"/share/{token}")).json()
    assert len(snapshot["progressPhotos"]) == 12


@pytest.mark.asyncio
async def test_shared_progress_photo_is_revalidated_and_client_bound(api_client, make_instructor, session_maker):
    _instructor_id, headers = await make_instructor("coach")
    shared_client = await _create_client(api_client, headers, name="Seo")
    other_client = await _create_client(api_client, headers, name="Bae")
    photo_id = (await _upload_progress_photo(api_client, headers, shared_client)).json()["id"]
    other_photo_id = (await _upload_progress_photo(api_client, headers, other_client)).json()["id"]
    token = await _share_report_for(api_client, headers, shared_client)

    other = await api_client.get(f"/share/{token}/client-photos/{other_photo_id}")
    unknown_token = await api_client.get(f"/share/{'0' * 32}/client-photos/{photo_id}")
    assert other.status_code == 404
    assert unknown_token.status_code == 404

    async with session_maker() as db:
        await db.execute(
            update(ReportShare).values(expires_at=datetime.now(timezone.utc) - timedelta(seconds=1))
        )
        await db.commit()

    expired = await api_client.get(f"/share/{token}/client-photos/{photo_id}")
    assert expired.status_code == 410
