"""Tests for the HTTP API."""
import pytest
from fastapi.testclient import TestClient

from autocue.api.app import app
from autocue.api.state import get_state

client = TestClient(app)

SCENARIO_CONFIG = {
    "before": {"reference": "firstHotCue", "count": 2, "interval_bars": 8},
    "after": {"reference": "lastHotCue", "count": 1, "interval_bars": 16, "cue_kind": "hot"},
    "cue_kind": "memory",
}


@pytest.fixture(autouse=True)
def reset_state():
    get_state().reset()
    yield
    get_state().reset()


@pytest.fixture
def loaded(sample_xml):
    response = client.post("/api/collection/load", json={"content": sample_xml})
    assert response.status_code == 200
    return response.json()


class TestLoadCollection:

    def test_load_content(self, loaded):
        assert loaded == {"path": None, "track_count": 3, "playlist_count": 1}

    def test_load_path(self, sample_xml, tmp_path):
        path = tmp_path / "rekordbox.xml"
        path.write_text(sample_xml, encoding="utf-8")
        response = client.post("/api/collection/load", json={"path": str(path)})
        assert response.status_code == 200
        assert response.json()["path"] == str(path)

    def test_missing_file(self, tmp_path):
        response = client.post("/api/collection/load", json={"path": str(tmp_path / "nope.xml")})
        assert response.status_code == 400
        assert response.json()["detail"].startswith("Error loading collection:")

    def test_malformed_xml(self):
        response = client.post("/api/collection/load", json={"content": "<DJ_PLAYLISTS>"})
        assert response.status_code == 400
        assert "Error parsing XML" in response.json()["detail"]

    def test_not_a_collection(self):
        response = client.post("/api/collection/load", json={"content": "<DJ_PLAYLISTS></DJ_PLAYLISTS>"})
        assert response.status_code == 400
        assert "Invalid Rekordbox XML format" in response.json()["detail"]

    def test_nothing_provided(self):
        response = client.post("/api/collection/load", json={})
        assert response.status_code == 400

    def test_failed_load_keeps_previous(self, loaded):
        client.post("/api/collection/load", json={"content": "<oops"})
        assert client.get("/api/collection/tracks").status_code == 200


class TestBrowse:

    def test_tracks(self, loaded):
        response = client.get("/api/collection/tracks")
        assert response.status_code == 200
        tracks = response.json()
        assert [t["id"] for t in tracks] == ["1", "2", "3"]
        assert tracks[0]["hot_cues"][0]["time_formatted"] == "00:30.000"
        assert tracks[0]["hot_cues"][0]["letter"] == "A"
        assert tracks[1]["memory_cues"][0]["start"] == 10.0

    def test_playlists(self, loaded):
        response = client.get("/api/collection/playlists")
        assert response.json() == [
            {"id": "playlist-0", "name": "Warmup", "path": "ROOT / Sets / Warmup", "track_ids": ["1", "2"]}
        ]

    def test_nothing_loaded(self):
        assert client.get("/api/collection/tracks").status_code == 409
        assert client.get("/api/collection/playlists").status_code == 409


class TestProcess:

    def test_process_and_fetch_result(self, loaded):
        response = client.post(
            "/api/cues/process",
            json={"track_ids": ["1", "2", "3"], "config": SCENARIO_CONFIG},
        )
        assert response.status_code == 200
        body = response.json()
        assert (body["processed"], body["skipped"], body["added"]) == (1, 2, 2)
        assert body["missing_ids"] == []
        assert body["output_path"] is None
        assert [(a["Start"], a["Num"], a["Name"]) for a in body["outcomes"][0]["added"]] == [
            ("14.000", "-1", "Auto 2"),
            ("62.000", "1", "Auto 1"),
        ]
        assert body["outcomes"][1]["reason"] == "couldn't find reference points"

        result = client.get("/api/cues/result")
        assert result.status_code == 200
        assert result.headers["content-type"].startswith("application/xml")
        assert '<NODE Name="Autocue Processed Tracks" Type="1" KeyType="0" Entries="3">' in result.text

    def test_default_config(self, loaded):
        response = client.post("/api/cues/process", json={"track_ids": ["1"]})
        assert response.status_code == 200
        assert response.json()["added"] == 4

    def test_writes_output_path(self, loaded, tmp_path):
        target = tmp_path / "out.xml"
        response = client.post(
            "/api/cues/process",
            json={"track_ids": ["1"], "output_path": str(target)},
        )
        assert response.json()["output_path"] == str(target)
        assert target.read_text(encoding="utf-8") == client.get("/api/cues/result").text

    def test_empty_selection(self, loaded):
        response = client.post("/api/cues/process", json={"track_ids": []})
        assert response.status_code == 400

    def test_invalid_config(self, loaded):
        config = {"before": {"reference": "specificHotCue", "cue_letter": "Z"}}
        response = client.post("/api/cues/process", json={"track_ids": ["1"], "config": config})
        assert response.status_code == 422

    def test_nothing_loaded(self):
        response = client.post("/api/cues/process", json={"track_ids": ["1"]})
        assert response.status_code == 409

    def test_no_result_yet(self, loaded):
        assert client.get("/api/cues/result").status_code == 404
