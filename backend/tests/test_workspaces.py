"""Tests for workspaces and the permission model."""

import pytest
from httpx import AsyncClient
from sqlalchemy import select

from memshelf.errors import ForbiddenError
from memshelf.models import Permission, Workspace
from memshelf.services import permissions
from memshelf.services.permissions import AccessLevel
from memshelf.services.repository import Repository


class TestPermissionService:
    async def test_check_access_levels(self, db_session, alice, bob, make_user, grant, make_workspace):
        carol = await make_user("carol")
        workspace = await make_workspace("w", owner=alice)
        await grant(bob, workspace, can_write=False)

        owner = await permissions.check_access(db_session, workspace, alice)
        reader = await permissions.check_access(db_session, workspace, bob)
        stranger = await permissions.check_access(db_session, workspace, carol)

        assert (owner.has_permission, owner.can_write) == (True, True)
        assert (reader.has_permission, reader.can_write) == (True, False)
        assert (stranger.has_permission, stranger.can_write) == (False, False)

    async def test_soft_deleted_permission_grants_nothing(self, db_session, alice, make_workspace):
        workspace = await make_workspace("w", owner=alice)
        permission = (await db_session.execute(select(Permission))).scalar_one()
        await Repository(db_session, Permission).soft_delete(permission)
        await db_session.commit()

        check = await permissions.check_access(db_session, workspace, alice)

        assert check.has_permission is False

    async def test_require_write_messages(self, db_session, alice, bob, make_user, grant, make_workspace):
        carol = await make_user("carol")
        workspace = await make_workspace("w", owner=alice)
        await grant(bob, workspace, can_write=False)

        with pytest.raises(ForbiddenError, match="write permissions"):
            await permissions.require_access(db_session, workspace, bob, AccessLevel.WRITE)
        with pytest.raises(ForbiddenError, match="read permissions"):
            await permissions.require_access(db_session, workspace, carol, AccessLevel.READ)

    async def test_create_workspace_grants_creator_write(self, db_session, alice):
        workspace = await permissions.create_workspace(db_session, alice, "mine", None)

        result = await db_session.execute(select(Permission).where(Permission.workspace_id == workspace.id))
        permission = result.scalar_one()
        assert permission.user_id == alice.id
        assert permission.can_write is True


class TestWorkspacesAPI:
    async def test_create_workspace(self, client: AsyncClient, alice, auth):
        response = await client.post(
            "/api/v1/workspaces", json={"name": "Research", "description": "papers"}, headers=auth(alice)
        )

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["data"]["name"] == "Research"
        assert "createdAt" in body["data"]

    async def test_stranger_gets_forbidden_not_not_found(self, client: AsyncClient, alice, bob, auth):
        created = await client.post("/api/v1/workspaces", json={"name": "W"}, headers=auth(alice))
        workspace_id = created.json()["data"]["id"]

        owner_view = await client.get(f"/api/v1/workspaces/{workspace_id}", headers=auth(alice))
        stranger_view = await client.get(f"/api/v1/workspaces/{workspace_id}", headers=auth(bob))

        assert owner_view.status_code == 200
        assert stranger_view.status_code == 403
        assert stranger_view.json()["error"]["code"] == "FORBIDDEN"
        assert stranger_view.json()["error"]["message"] == "You do not have read permissions to the workspace"

    async def test_missing_workspace_is_not_found(self, client: AsyncClient, alice, auth):
        response = await client.get(
            "/api/v1/workspaces/00000000-0000-0000-0000-000000000000", headers=auth(alice)
        )
        assert response.status_code == 404
        assert response.json()["error"]["message"] == "Workspace not found"

    async def test_duplicate_name_conflicts(self, client: AsyncClient, alice, auth):
        await client.post("/api/v1/workspaces", json={"name": "Same"}, headers=auth(alice))
        response = await client.post("/api/v1/workspaces", json={"name": "Same"}, headers=auth(alice))

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "DUPLICATE_RESOURCE"

    async def test_list_returns_exactly_permitted_workspaces(
        self, client: AsyncClient, db_session, alice, bob, auth, grant, make_workspace
    ):
        own = await make_workspace("own", owner=alice)
        shared = await make_workspace("shared", owner=bob)
        await grant(alice, shared, can_write=False)
        await make_workspace("foreign", owner=bob)
        revoked = await make_workspace("revoked", owner=bob)
        await grant(alice, revoked, can_write=True)
        gone = await make_workspace("gone", owner=alice)

        permission = (
            await db_session.execute(
                select(Permission).where(Permission.user_id == alice.id, Permission.workspace_id == revoked.id)
            )
        ).scalar_one()
        await Repository(db_session, Permission).soft_delete(permission)
        await Repository(db_session, Workspace).soft_delete(gone)
        await db_session.commit()

        response = await client.get("/api/v1/workspaces", headers=auth(alice))

        assert response.status_code == 200
        ids = {w["id"] for w in response.json()["data"]}
        assert ids == {str(own.id), str(shared.id)}
        assert response.json()["pagination"]["total"] == 2

    async def test_read_only_user_cannot_modify(
        self, client: AsyncClient, db_session, alice, bob, auth, grant, make_workspace
    ):
        workspace = await make_workspace("w", owner=alice)
        await grant(bob, workspace, can_write=False)

        update = await client.put(f"/api/v1/workspaces/{workspace.id}", json={"name": "hijacked"}, headers=auth(bob))
        delete = await client.delete(f"/api/v1/workspaces/{workspace.id}", headers=auth(bob))

        assert update.status_code == 403
        assert update.json()["error"]["message"] == "You do not have write permissions to the workspace"
        assert delete.status_code == 403
        await db_session.refresh(workspace)
        assert workspace.name == "w"
        assert workspace.deleted_at is None

    async def test_update_and_delete(self, client: AsyncClient, alice, auth, make_workspace):
        workspace = await make_workspace("w", owner=alice)

        update = await client.put(
            f"/api/v1/workspaces/{workspace.id}", json={"description": "updated"}, headers=auth(alice)
        )
        assert update.status_code == 200
        assert update.json()["data"]["description"] == "updated"
        assert update.json()["data"]["name"] == "w"

        delete = await client.delete(f"/api/v1/workspaces/{workspace.id}", headers=auth(alice))
        assert delete.status_code == 204

        after = await client.get(f"/api/v1/workspaces/{workspace.id}", headers=auth(alice))
        assert after.status_code == 404

    async def test_list_pagination_metadata(self, client: AsyncClient, alice, auth, make_workspace):
        for i in range(3):
            await make_workspace(f"w{i}", owner=alice)

        response = await client.get("/api/v1/workspaces?page=2&limit=2", headers=auth(alice))

        pagination = response.json()["pagination"]
        assert len(response.json()["data"]) == 1
        assert pagination == {
            "page": 2,
            "limit": 2,
            "total": 3,
            "totalPages": 2,
            "hasNext": False,
            "hasPrev": True,
        }

    async def test_list_ordered_by_name(self, client: AsyncClient, alice, auth, make_workspace):
        for name in ("beta", "alpha", "gamma"):
            await make_workspace(name, owner=alice)

        response = await client.get("/api/v1/workspaces?orderField=name&orderDir=ASC", headers=auth(alice))

        assert response.status_code == 200
        assert [w["name"] for w in response.json()["data"]] == ["alpha", "beta", "gamma"]

    async def test_unknown_order_field_rejected(self, client: AsyncClient, alice, auth):
        response = await client.get("/api/v1/workspaces?orderField=description", headers=auth(alice))

        assert response.status_code == 400
        assert response.json()["error"]["validationErrors"][0]["path"] == "orderField"

    async def test_page_beyond_integer_range_rejected(self, client: AsyncClient, alice, auth):
        response = await client.get(f"/api/v1/workspaces?page={2**62}", headers=auth(alice))

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_FAILED"
        assert response.json()["error"]["validationErrors"][0]["path"] == "page"

    async def test_description_cleared_by_explicit_null(self, client: AsyncClient, alice, auth):
        created = await client.post(
            "/api/v1/workspaces", json={"name": "w", "description": "temporary"}, headers=auth(alice)
        )
        workspace_id = created.json()["data"]["id"]

        renamed = await client.put(f"/api/v1/workspaces/{workspace_id}", json={"name": "w2"}, headers=auth(alice))
        assert renamed.json()["data"]["description"] == "temporary"

        cleared = await client.put(
            f"/api/v1/workspaces/{workspace_id}", json={"description": None}, headers=auth(alice)
        )
        assert cleared.status_code == 200
        assert cleared.json()["data"]["description"] is None
        assert cleared.json()["data"]["name"] == "w2"


class TestWorkspaceCreationAtomicity:
    async def test_failed_permission_insert_leaves_no_workspace(self, db_session, alice, monkeypatch):
        async def failing_grant(*args, **kwargs):
            raise RuntimeError("permission insert failed")

        monkeypatch.setattr(permissions, "grant_permission", failing_grant)

        with pytest.raises(RuntimeError):
            await permissions.create_workspace(db_session, alice, "orphan", None)

        workspaces = (await db_session.execute(select(Workspace))).scalars().all()
        assert workspaces == []
        granted = (await db_session.execute(select(Permission))).scalars().all()
        assert granted == []
