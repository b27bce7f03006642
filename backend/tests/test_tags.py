"""Tests for workspace and note tags."""

from httpx import AsyncClient
from sqlalchemy import select

from memshelf.models import NoteTag


class TestWorkspaceTags:
    async def test_add_and_list(self, client: AsyncClient, alice, auth, make_workspace):
        workspace = await make_workspace("w", owner=alice)

        created = await client.post(
            f"/api/v1/workspaces/{workspace.id}/tags",
            json={"name": "urgent", "displayName": "Urgent"},
            headers=auth(alice),
        )
        listing = await client.get(f"/api/v1/workspaces/{workspace.id}/tags", headers=auth(alice))

        assert created.status_code == 201
        assert created.json()["data"]["displayName"] == "Urgent"
        assert [t["name"] for t in listing.json()["data"]] == ["urgent"]

    async def test_same_tag_twice_conflicts(self, client: AsyncClient, alice, auth, make_workspace):
        workspace = await make_workspace("w", owner=alice)
        url = f"/api/v1/workspaces/{workspace.id}/tags"

        await client.post(url, json={"name": "urgent", "displayName": "Urgent"}, headers=auth(alice))
        response = await client.post(url, json={"name": "urgent", "displayName": "Urgent"}, headers=auth(alice))

        assert response.status_code == 409

    async def test_tag_shared_across_workspaces(self, client: AsyncClient, alice, auth, make_workspace):
        first = await make_workspace("one", owner=alice)
        second = await make_workspace("two", owner=alice)
        body = {"name": "shared", "displayName": "Shared"}

        a = await client.post(f"/api/v1/workspaces/{first.id}/tags", json=body, headers=auth(alice))
        b = await client.post(f"/api/v1/workspaces/{second.id}/tags", json=body, headers=auth(alice))

        assert b.status_code == 201
        assert a.json()["data"]["id"] == b.json()["data"]["id"]

    async def test_blank_name_rejected(self, client: AsyncClient, alice, auth, make_workspace):
        workspace = await make_workspace("w", owner=alice)

        response = await client.post(
            f"/api/v1/workspaces/{workspace.id}/tags",
            json={"name": "   ", "displayName": "Blank"},
            headers=auth(alice),
        )

        assert response.status_code == 400
        assert response.json()["error"]["validationErrors"][0]["path"] == "name"

    async def test_read_only_user_cannot_add(self, client: AsyncClient, alice, bob, auth, grant, make_workspace):
        workspace = await make_workspace("w", owner=alice)
        await grant(bob, workspace, can_write=False)

        response = await client.post(
            f"/api/v1/workspaces/{workspace.id}/tags",
            json={"name": "x", "displayName": "X"},
            headers=auth(bob),
        )

        assert response.status_code == 403


class TestNoteTags:
    async def _tag(self, client, workspace, user, auth, name="topic"):
        response = await client.post(
            f"/api/v1/workspaces/{workspace.id}/tags",
            json={"name": name, "displayName": name.title()},
            headers=auth(user),
        )
        return response.json()["data"]["id"]

    async def test_tag_untag_note(self, client: AsyncClient, alice, auth, make_workspace, make_note):
        workspace = await make_workspace("w", owner=alice)
        note = await make_note(workspace)
        tag_id = await self._tag(client, workspace, alice, auth)
        url = f"/api/v1/notes/{note.id}/tags"

        added = await client.post(url, json={"tagId": tag_id}, headers=auth(alice))
        assert added.status_code == 201
        assert added.json()["data"]["tagId"] == tag_id

        again = await client.post(url, json={"tagId": tag_id}, headers=auth(alice))
        assert again.status_code == 201

        listing = await client.get(url, headers=auth(alice))
        assert [t["id"] for t in listing.json()["data"]] == [tag_id]

        removed = await client.delete(f"{url}/{tag_id}", headers=auth(alice))
        assert removed.status_code == 204
        listing = await client.get(url, headers=auth(alice))
        assert listing.json()["data"] == []

    async def test_unknown_tag_not_found(self, client: AsyncClient, alice, auth, make_workspace, make_note):
        workspace = await make_workspace("w", owner=alice)
        note = await make_note(workspace)

        response = await client.post(
            f"/api/v1/notes/{note.id}/tags",
            json={"tagId": "00000000-0000-0000-0000-000000000000"},
            headers=auth(alice),
        )

        assert response.status_code == 404

    async def test_read_only_user_cannot_tag(
        self, client: AsyncClient, alice, bob, auth, grant, make_workspace, make_note
    ):
        workspace = await make_workspace("w", owner=alice)
        await grant(bob, workspace, can_write=False)
        note = await make_note(workspace)
        tag_id = await self._tag(client, workspace, alice, auth)

        added = await client.post(f"/api/v1/notes/{note.id}/tags", json={"tagId": tag_id}, headers=auth(bob))
        listing = await client.get(f"/api/v1/notes/{note.id}/tags", headers=auth(bob))

        assert added.status_code == 403
        assert listing.status_code == 200
        assert listing.json()["data"] == []

    async def test_read_only_user_cannot_untag(
        self, client: AsyncClient, db_session, alice, bob, auth, grant, make_workspace, make_note
    ):
        workspace = await make_workspace("w", owner=alice)
        await grant(bob, workspace, can_write=False)
        note = await make_note(workspace)
        tag_id = await self._tag(client, workspace, alice, auth)
        await client.post(f"/api/v1/notes/{note.id}/tags", json={"tagId": tag_id}, headers=auth(alice))

        response = await client.delete(f"/api/v1/notes/{note.id}/tags/{tag_id}", headers=auth(bob))

        assert response.status_code == 403
        rows = (await db_session.execute(select(NoteTag).where(NoteTag.note_id == note.id))).scalars().all()
        assert [str(row.tag_id) for row in rows] == [tag_id]
