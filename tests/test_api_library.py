"""API tests for the track catalog and playlist routes."""

NEW_TRACK = {
    "title": "Fresh Cut",
    "artist": "Somebody",
    "duration": 201,
    "uri": "https://cdn.example.com/fresh.mp3",
}


class TestTracksAPI:
    def test_list_tracks(self, client, catalog):
        data = client.get("/api/tracks").json()

        assert data["total"] == 4
        assert data["limit"] == 100
        assert {t["id"] for t in data["tracks"]} == {"t1", "t2", "t3", "t4"}

    def test_list_tracks_search_and_source(self, client, catalog):
        client.post("/api/tracks", json={**NEW_TRACK, "id": "u1", "source": "upload"})

        uploads = client.get("/api/tracks", params={"source": "upload"}).json()
        assert [t["id"] for t in uploads["tracks"]] == ["u1"]

        found = client.get("/api/tracks", params={"search": "Song 3"}).json()
        assert [t["id"] for t in found["tracks"]] == ["t3"]

    def test_list_tracks_bad_source(self, client):
        assert client.get("/api/tracks", params={"source": "bootleg"}).status_code == 422

    def test_get_track(self, client, catalog):
        assert client.get("/api/tracks/t1").json()["title"] == "Song 1"
        assert client.get("/api/tracks/ghost").status_code == 404

    def test_create_track(self, client):
        response = client.post("/api/tracks", json=NEW_TRACK)

        assert response.status_code == 201
        data = response.json()
        assert data["source"] == "catalog"
        assert data["id"]

    def test_create_duplicate_track(self, client, catalog):
        response = client.post("/api/tracks", json={**NEW_TRACK, "id": "t1"})
        assert response.status_code == 409

    def test_create_track_validation(self, client):
        assert client.post("/api/tracks", json={**NEW_TRACK, "duration": -5}).status_code == 422
        assert client.post("/api/tracks", json={"title": "No uri"}).status_code == 422

    def test_delete_track(self, client, catalog):
        assert client.delete("/api/tracks/t1").status_code == 204
        assert client.delete("/api/tracks/t1").status_code == 404


class TestPlaylistsAPI:
    def test_create_and_list(self, client):
        response = client.post("/api/playlists", json={"name": "Gym"})

        assert response.status_code == 201
        assert [p["name"] for p in client.get("/api/playlists").json()["playlists"]] == ["Gym"]

    def test_create_duplicate(self, client):
        client.post("/api/playlists", json={"name": "Gym"})
        assert client.post("/api/playlists", json={"name": "Gym"}).status_code == 409

    def test_add_tracks(self, client, catalog):
        playlist_id = client.post("/api/playlists", json={"name": "Gym"}).json()["id"]

        response = client.post(f"/api/playlists/{playlist_id}/tracks", json={"track_ids": ["t2", "t1", "t2"]})

        assert response.status_code == 201
        assert response.json() == {"added": 2, "playlist_track_count": 2}
        tracks = client.get(f"/api/playlists/{playlist_id}").json()["tracks"]
        assert [t["id"] for t in tracks] == ["t2", "t1"]

    def test_add_tracks_to_unknown_playlist(self, client, catalog):
        response = client.post("/api/playlists/999/tracks", json={"track_ids": ["t1"]})
        assert response.status_code == 404

    def test_add_tracks_requires_ids(self, client):
        playlist_id = client.post("/api/playlists", json={"name": "Gym"}).json()["id"]
        response = client.post(f"/api/playlists/{playlist_id}/tracks", json={"track_ids": []})
        assert response.status_code == 422

    def test_update(self, client):
        playlist_id = client.post("/api/playlists", json={"name": "Gym"}).json()["id"]
        client.post("/api/playlists", json={"name": "Taken"})

        response = client.put(f"/api/playlists/{playlist_id}", json={"name": "Run"})
        assert response.status_code == 200
        assert response.json()["name"] == "Run"

        assert client.put(f"/api/playlists/{playlist_id}", json={"name": "Taken"}).status_code == 409
        assert client.put("/api/playlists/999", json={"name": "Nope"}).status_code == 404

    def test_tracks_listing_and_removal(self, client, catalog):
        playlist_id = client.post("/api/playlists", json={"name": "Gym"}).json()["id"]
        client.post(f"/api/playlists/{playlist_id}/tracks", json={"track_ids": ["t1", "t2", "t3"]})

        assert client.delete(f"/api/playlists/{playlist_id}/tracks/t2").status_code == 204
        assert client.delete(f"/api/playlists/{playlist_id}/tracks/t2").status_code == 404

        data = client.get(f"/api/playlists/{playlist_id}/tracks").json()
        assert data["total"] == 2
        assert [t["id"] for t in data["tracks"]] == ["t1", "t3"]

    def test_get_and_delete(self, client):
        playlist_id = client.post("/api/playlists", json={"name": "Gym"}).json()["id"]

        assert client.get(f"/api/playlists/{playlist_id}").json()["track_count"] == 0
        assert client.delete(f"/api/playlists/{playlist_id}").status_code == 204
        assert client.get(f"/api/playlists/{playlist_id}").status_code == 404
