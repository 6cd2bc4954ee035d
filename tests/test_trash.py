import uuid

import pytest
from httpx import AsyncClient

from conftest import auth_header, create_member, report_payload


async def trashed_report(client: AsyncClient, token: str, reporter_uid: str, **overrides) -> str:
    created = await client.post(
        "/api/userReports", json=report_payload(reporterId=reporter_uid, **overrides)
    )
    report_id = created.json()["insertedId"]
    response = await client.delete(f"/api/userReports/{report_id}", headers=auth_header(token))
    assert response.status_code == 200
    return report_id


@pytest.fixture
async def reporter(client: AsyncClient, database) -> tuple[str, str]:
    return await create_member(client, database, "reporter@example.com")


# ==================== Listing ====================


@pytest.mark.asyncio
async def test_trash_listing_requires_admin(client: AsyncClient, reporter):
    token, _ = reporter

    response = await client.get("/api/trashedReports", headers=auth_header(token))

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_trash_listing_requires_token(client: AsyncClient):
    response = await client.get("/api/trashedReports")

    assert response.status_code == 401
    assert response.json()["message"] == "Unauthorized: no token"


@pytest.mark.asyncio
async def test_trash_listing_only_contains_trashed(client: AsyncClient, reporter, admin_token):
    token, uid = reporter
    trashed_id = await trashed_report(client, token, uid, name="Gone")
    await client.post("/api/userReports", json=report_payload(name="Still here"))

    response = await client.get("/api/trashedReports", headers=auth_header(admin_token))

    body = response.json()
    assert body["totalItems"] == 1
    assert body["data"][0]["id"] == trashed_id


@pytest.mark.asyncio
async def test_trash_listing_search(client: AsyncClient, reporter, admin_token):
    token, uid = reporter
    await trashed_report(client, token, uid, name="Carol")
    await trashed_report(client, token, uid, name="Dave")

    response = await client.get(
        "/api/trashedReports", params={"search": "car"}, headers=auth_header(admin_token)
    )

    assert [r["name"] for r in response.json()["data"]] == ["Carol"]


# ==================== Restore ====================


@pytest.mark.asyncio
async def test_restore_report(client: AsyncClient, reporter, admin_token):
    token, uid = reporter
    report_id = await trashed_report(client, token, uid)

    response = await client.patch(
        f"/api/trashedReports/{report_id}/restore", headers=auth_header(admin_token)
    )

    assert response.status_code == 200
    assert response.json()["message"] == "Report restored successfully."
    active = (await client.get("/api/userReports")).json()
    assert [r["id"] for r in active["data"]] == [report_id]
    restored = active["data"][0]
    assert "deletedAt" not in restored
    assert "deletedBy" not in restored


@pytest.mark.asyncio
async def test_restore_active_report_is_no_op(client: AsyncClient, admin_token):
    created = await client.post("/api/userReports", json=report_payload())
    report_id = created.json()["insertedId"]

    response = await client.patch(
        f"/api/trashedReports/{report_id}/restore", headers=auth_header(admin_token)
    )

    assert response.status_code == 200
    assert "No changes made" in response.json()["message"]


@pytest.mark.asyncio
async def test_restore_unknown_report(client: AsyncClient, admin_token):
    response = await client.patch(
        f"/api/trashedReports/{uuid.uuid4()}/restore", headers=auth_header(admin_token)
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_restore_requires_admin(client: AsyncClient, reporter):
    token, uid = reporter
    report_id = await trashed_report(client, token, uid)

    response = await client.patch(
        f"/api/trashedReports/{report_id}/restore", headers=auth_header(token)
    )

    assert response.status_code == 403


# ==================== Purge ====================


@pytest.mark.asyncio
async def test_purge_trashed_report(client: AsyncClient, reporter, admin_token):
    token, uid = reporter
    report_id = await trashed_report(client, token, uid)

    response = await client.delete(
        f"/api/trashedReports/{report_id}/permanent", headers=auth_header(admin_token)
    )

    assert response.status_code == 200
    trash = (await client.get("/api/trashedReports", headers=auth_header(admin_token))).json()
    assert trash["totalItems"] == 0

    # Purge is terminal
    again = await client.patch(
        f"/api/trashedReports/{report_id}/restore", headers=auth_header(admin_token)
    )
    assert again.status_code == 404


@pytest.mark.asyncio
async def test_purge_active_report_not_found_in_trash(client: AsyncClient, admin_token):
    created = await client.post("/api/userReports", json=report_payload())
    report_id = created.json()["insertedId"]

    response = await client.delete(
        f"/api/trashedReports/{report_id}/permanent", headers=auth_header(admin_token)
    )

    assert response.status_code == 404
    assert (await client.get("/api/userReports")).json()["totalItems"] == 1


@pytest.mark.asyncio
async def test_purge_invalid_id(client: AsyncClient, admin_token):
    response = await client.delete(
        "/api/trashedReports/12345/permanent", headers=auth_header(admin_token)
    )

    assert response.status_code == 400


# ==================== Bulk action ====================


@pytest.mark.asyncio
async def test_bulk_restore(client: AsyncClient, reporter, admin_token):
    token, uid = reporter
    ids = [await trashed_report(client, token, uid, name=f"R{i}") for i in range(3)]

    response = await client.post(
        "/api/trashedReports/bulk-action",
        json={"ids": ids[:2], "action": "restore"},
        headers=auth_header(admin_token),
    )

    assert response.status_code == 200
    body = response.json()
    assert body["affectedCount"] == 2
    assert body["validCount"] == 2
    trash = (await client.get("/api/trashedReports", headers=auth_header(admin_token))).json()
    assert [r["id"] for r in trash["data"]] == [ids[2]]


@pytest.mark.asyncio
async def test_bulk_permanent_delete_drops_malformed_ids(
    client: AsyncClient, reporter, admin_token
):
    token, uid = reporter
    ids = [await trashed_report(client, token, uid, name=f"R{i}") for i in range(2)]

    response = await client.post(
        "/api/trashedReports/bulk-action",
        json={"ids": ids + ["bogus", 42, None], "action": "permanent_delete"},
        headers=auth_header(admin_token),
    )

    assert response.status_code == 200
    body = response.json()
    assert body["requestedCount"] == 5
    assert body["validCount"] == 2
    assert body["affectedCount"] == 2
    trash = (await client.get("/api/trashedReports", headers=auth_header(admin_token))).json()
    assert trash["totalItems"] == 0


@pytest.mark.asyncio
async def test_bulk_action_skips_active_reports(client: AsyncClient, admin_token):
    created = await client.post("/api/userReports", json=report_payload())
    report_id = created.json()["insertedId"]

    response = await client.post(
        "/api/trashedReports/bulk-action",
        json={"ids": [report_id], "action": "permanent_delete"},
        headers=auth_header(admin_token),
    )

    assert response.status_code == 200
    assert response.json()["affectedCount"] == 0
    assert (await client.get("/api/userReports")).json()["totalItems"] == 1


@pytest.mark.asyncio
async def test_bulk_action_all_ids_invalid(client: AsyncClient, admin_token):
    response = await client.post(
        "/api/trashedReports/bulk-action",
        json={"ids": ["nope", "also-nope"], "action": "restore"},
        headers=auth_header(admin_token),
    )

    assert response.status_code == 400
    assert response.json()["message"] == "No valid report IDs provided."


@pytest.mark.asyncio
async def test_bulk_action_invalid_action(client: AsyncClient, admin_token):
    response = await client.post(
        "/api/trashedReports/bulk-action",
        json={"ids": [str(uuid.uuid4())], "action": "archive"},
        headers=auth_header(admin_token),
    )

    assert response.status_code == 400
    assert "Invalid action" in response.json()["message"]


@pytest.mark.asyncio
async def test_bulk_action_requires_admin(client: AsyncClient, reporter):
    token, _ = reporter

    response = await client.post(
        "/api/trashedReports/bulk-action",
        json={"ids": [str(uuid.uuid4())], "action": "restore"},
        headers=auth_header(token),
    )

    assert response.status_code == 403
