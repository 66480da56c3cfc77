"""
Integration tests for the playlist endpoints:
- POST/GET/PUT/DELETE /playlists
- POST /playlists/<id>/content (append)
- DELETE /playlists/<id>/content/<content_id> (remove, no renumbering)
"""


def _entries(client, headers, playlist_id):
    body = client.get(f"/playlists/{playlist_id}", headers=headers).json()
    return [(entry["contentId"], entry["order"]) for entry in body["playlistContents"]]


def _create_playlist(client, headers, name="A"):
    resp = client.post("/playlists", json={"name": name}, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


class TestPlaylistLifecycle:
    def test_end_to_end_ordering_scenario(self, client, auth_headers, upload):
        playlist = _create_playlist(client, auth_headers, "A")
        x1 = upload(auth_headers, "x.mp4").json()["id"]
        y1 = upload(auth_headers, "y.png").json()["id"]

        first = client.post(f"/playlists/{playlist['id']}/content", json={"contentId": x1}, headers=auth_headers)
        second = client.post(f"/playlists/{playlist['id']}/content", json={"contentId": y1}, headers=auth_headers)
        assert first.status_code == 201 and first.json()["order"] == 0
        assert second.status_code == 201 and second.json()["order"] == 1
        assert _entries(client, auth_headers, playlist["id"]) == [(x1, 0), (y1, 1)]

        resp = client.put(f"/playlists/{playlist['id']}", json={"contentIds": [y1, x1]}, headers=auth_headers)
        assert resp.status_code == 200
        assert _entries(client, auth_headers, playlist["id"]) == [(y1, 0), (x1, 1)]

        client.delete(f"/content/{y1}", headers=auth_headers)
        # Gap stays until the next full replace.
        assert _entries(client, auth_headers, playlist["id"]) == [(x1, 1)]

    def test_payload_uses_admin_ui_field_names(self, client, auth_headers, upload):
        playlist = _create_playlist(client, auth_headers)
        clip = upload(auth_headers, "clip.mp4", duration="5").json()["id"]
        client.post(f"/playlists/{playlist['id']}/content", json={"contentId": clip}, headers=auth_headers)

        body = client.get(f"/playlists/{playlist['id']}", headers=auth_headers).json()

        assert set(body) == {
            "id", "name", "userId", "createdAt", "updatedAt",
            "playlistContents", "totalDuration", "totalSize",
        }
        entry = body["playlistContents"][0]
        assert set(entry) == {"id", "playlistId", "contentId", "order", "createdAt", "content"}
        assert entry["content"]["filePath"]

    def test_create_requires_name(self, client, auth_headers):
        assert client.post("/playlists", json={}, headers=auth_headers).status_code == 400
        assert client.post("/playlists", json={"name": "   "}, headers=auth_headers).status_code == 400

    def test_new_playlist_is_empty(self, client, auth_headers):
        playlist = _create_playlist(client, auth_headers)

        assert playlist["playlistContents"] == []
        assert playlist["totalDuration"] == 0
        assert playlist["totalSize"] == 0

    def test_rename_without_touching_entries(self, client, auth_headers, upload):
        playlist = _create_playlist(client, auth_headers)
        clip = upload(auth_headers, "clip.mp4").json()["id"]
        client.put(f"/playlists/{playlist['id']}", json={"contentIds": [clip]}, headers=auth_headers)

        resp = client.put(f"/playlists/{playlist['id']}", json={"name": "Renamed"}, headers=auth_headers)

        assert resp.json()["name"] == "Renamed"
        assert _entries(client, auth_headers, playlist["id"]) == [(clip, 0)]

    def test_rename_and_replace_together(self, client, auth_headers, upload):
        playlist = _create_playlist(client, auth_headers)
        a = upload(auth_headers, "a.mp4").json()["id"]
        b = upload(auth_headers, "b.mp4").json()["id"]

        resp = client.put(
            f"/playlists/{playlist['id']}",
            json={"name": "Both", "contentIds": [b, a, b]},
            headers=auth_headers,
        )

        assert resp.json()["name"] == "Both"
        assert [(e["contentId"], e["order"]) for e in resp.json()["playlistContents"]] == [(b, 0), (a, 1), (b, 2)]

    def test_replace_with_foreign_content_is_not_found(self, client, auth_headers, other_headers, upload):
        playlist = _create_playlist(client, auth_headers)
        theirs = upload(other_headers, "theirs.mp4").json()["id"]

        resp = client.put(
            f"/playlists/{playlist['id']}",
            json={"name": "Should not stick", "contentIds": [theirs]},
            headers=auth_headers,
        )

        assert resp.status_code == 404
        assert client.get(f"/playlists/{playlist['id']}", headers=auth_headers).json()["name"] == "A"

    def test_delete_playlist_unassigns_players(self, client, auth_headers, upload):
        playlist = _create_playlist(client, auth_headers)
        clip = upload(auth_headers, "clip.mp4").json()["id"]
        client.post(f"/playlists/{playlist['id']}/content", json={"contentId": clip}, headers=auth_headers)
        player = client.post("/players", json={"name": "Lobby"}, headers=auth_headers).json()
        client.put(f"/players/{player['id']}", json={"playlistId": playlist["id"]}, headers=auth_headers)

        resp = client.delete(f"/playlists/{playlist['id']}", headers=auth_headers)

        assert resp.status_code == 200
        assert client.get(f"/playlists/{playlist['id']}", headers=auth_headers).status_code == 404
        assert client.get(f"/players/{player['id']}", headers=auth_headers).json()["playlistId"] is None
        assert client.get(f"/content/{clip}", headers=auth_headers).status_code == 200


class TestAggregates:
    def test_list_reports_totals_per_playlist(self, client, auth_headers, upload):
        still = upload(auth_headers, "still.png", b"a" * 100, duration="10").json()["id"]
        clip = upload(auth_headers, "clip.mp4", b"b" * 300).json()["id"]
        busy = _create_playlist(client, auth_headers, "Busy")
        _create_playlist(client, auth_headers, "Idle")
        client.put(
            f"/playlists/{busy['id']}",
            json={"contentIds": [still, clip, still]},
            headers=auth_headers,
        )

        listed = {item["name"]: item for item in client.get("/playlists", headers=auth_headers).json()}

        assert listed["Busy"]["totalDuration"] == 20
        assert listed["Busy"]["totalSize"] == 500
        assert listed["Idle"]["totalDuration"] == 0
        assert listed["Idle"]["totalSize"] == 0


class TestEntryEndpoints:
    def test_remove_content_leaves_gap(self, client, auth_headers, upload):
        playlist = _create_playlist(client, auth_headers)
        ids = [upload(auth_headers, f"{name}.mp4").json()["id"] for name in ("a", "b", "c")]
        client.put(f"/playlists/{playlist['id']}", json={"contentIds": ids}, headers=auth_headers)

        resp = client.delete(f"/playlists/{playlist['id']}/content/{ids[1]}", headers=auth_headers)

        assert resp.status_code == 200
        assert resp.json() == {"message": "Content removed from playlist"}
        assert _entries(client, auth_headers, playlist["id"]) == [(ids[0], 0), (ids[2], 2)]

    def test_append_after_gap_uses_max_plus_one(self, client, auth_headers, upload):
        playlist = _create_playlist(client, auth_headers)
        ids = [upload(auth_headers, f"{name}.mp4").json()["id"] for name in ("a", "b", "c")]
        client.put(f"/playlists/{playlist['id']}", json={"contentIds": ids}, headers=auth_headers)
        client.delete(f"/playlists/{playlist['id']}/content/{ids[2]}", headers=auth_headers)

        resp = client.post(f"/playlists/{playlist['id']}/content", json={"contentId": ids[2]}, headers=auth_headers)

        assert resp.json()["order"] == 2
        assert resp.json()["content"]["id"] == ids[2]

    def test_append_requires_content_id(self, client, auth_headers):
        playlist = _create_playlist(client, auth_headers)

        resp = client.post(f"/playlists/{playlist['id']}/content", json={}, headers=auth_headers)

        assert resp.status_code == 400

    def test_append_unknown_content_is_not_found(self, client, auth_headers):
        playlist = _create_playlist(client, auth_headers)

        resp = client.post(
            f"/playlists/{playlist['id']}/content", json={"contentId": "missing"}, headers=auth_headers
        )

        assert resp.status_code == 404


class TestOwnership:
    def test_other_owner_sees_not_found_everywhere(self, client, auth_headers, other_headers, upload):
        playlist = _create_playlist(client, auth_headers)
        theirs = upload(other_headers, "theirs.mp4").json()["id"]
        base = f"/playlists/{playlist['id']}"

        assert client.get(base, headers=other_headers).status_code == 404
        assert client.put(base, json={"name": "x"}, headers=other_headers).status_code == 404
        assert client.post(f"{base}/content", json={"contentId": theirs}, headers=other_headers).status_code == 404
        assert client.delete(f"{base}/content/{theirs}", headers=other_headers).status_code == 404
        assert client.delete(base, headers=other_headers).status_code == 404
        assert client.get("/playlists", headers=other_headers).json() == []
        assert client.get(base, headers=auth_headers).json()["name"] == "A"
