from burrow.routes import terrain_api
import pytest

from burrow.terrain import InvalidTileOperation, RetryLimitExceeded
from burrow.utils.coord_codec import decode_coords, rle_decode


def test_archetypes_endpoint(client):
    r = client.get("/api/terrain/archetypes")
    assert r.status_code == 200
    data = r.get_json()
    assert set(data) == {"bare", "cavern", "fungal", "magma", "hive"}
    assert data["hive"]["wall_tile"] == "X"


def test_terrain_payload_shape(client):
    r = client.get("/api/terrain?seed=api&archetype=cavern&width=60&height=40")
    assert r.status_code == 200
    data = r.get_json()
    assert (data["width"], data["height"]) == (60, 40)
    assert data["seed"] == "api" and data["archetype"] == "cavern"
    assert len(data["rows"]) == 40 and all(len(row) == 60 for row in data["rows"])
    assert [rle_decode(r) for r in data["rle"]] == data["rows"]
    sx, sy = data["spawn"]
    assert data["rows"][sy][sx] in ".,\""
    assert len(data["opacity"]) == 40 and len(data["opacity"][0]) == 60
    for lake in data["lakes"]:
        for x, y in decode_coords(lake):
            assert data["rows"][y][x] in "~="
    for x, y in decode_coords(data["camps"]):
        assert data["rows"][y][x] == "*"
    assert data["metrics"]["attempts"] >= 1


def test_defaults_from_app_config(client):
    r = client.get("/api/terrain?seed=defaults")
    assert r.status_code == 200
    data = r.get_json()
    assert (data["width"], data["height"]) == (60, 40)


def test_same_seed_is_served_from_cache(client, monkeypatch):
    first = client.get("/api/terrain?seed=cached&archetype=bare&width=40&height=30").get_json()
    calls = []

    def boom(*a, **k):
        calls.append(a)
        raise AssertionError("cache miss")

    monkeypatch.setattr(terrain_api, "generate", boom)
    second = client.get("/api/terrain?seed=cached&archetype=bare&width=40&height=30").get_json()
    assert first == second
    assert calls == []


def test_cache_can_be_disabled(client, test_app, monkeypatch):
    monkeypatch.setitem(test_app.config, "TERRAIN_DISABLE_CACHE", True)
    client.get("/api/terrain?seed=nocache&archetype=bare&width=40&height=30")
    assert len(terrain_api._terrain_cache) == 0


def test_cache_is_bounded(client, test_app, monkeypatch):
    monkeypatch.setitem(test_app.config, "TERRAIN_CACHE_SIZE", 2)
    for seed in ("c1", "c2", "c3"):
        assert client.get(f"/api/terrain?seed={seed}&archetype=bare&width=40&height=30").status_code == 200
    assert len(terrain_api._terrain_cache) == 2
    assert ("c1", "bare", 40, 30) not in terrain_api._terrain_cache


def test_bad_requests(client):
    assert client.get("/api/terrain?archetype=swamp").status_code == 400
    assert client.get("/api/terrain?width=wide").status_code == 400
    assert client.get("/api/terrain?width=5&height=40").status_code == 400
    assert client.get("/api/terrain?width=5000").status_code == 400
    r = client.get("/api/terrain?width=20&height=20&archetype=bare")
    assert r.status_code == 400
    assert "error" in r.get_json()


def test_retry_limit_maps_to_503(client, monkeypatch):
    def fail(*a, **k):
        raise RetryLimitExceeded(3, "dig_radius_exceeded")

    monkeypatch.setattr(terrain_api, "generate", fail)
    r = client.get("/api/terrain?seed=doomed&archetype=bare")
    assert r.status_code == 503
    data = r.get_json()
    assert data["attempts"] == 3
    assert "dig_radius_exceeded" in data["error"]


def test_tile_operation_bug_is_not_reported_as_bad_request(client, monkeypatch):
    def broken(*a, **k):
        raise InvalidTileOperation("FLOOR has no deep variant")

    monkeypatch.setattr(terrain_api, "generate", broken)
    with pytest.raises(InvalidTileOperation):
        client.get("/api/terrain?seed=broken&archetype=bare")
