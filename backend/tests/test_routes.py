def test_health(client, registry):
    registry.create_room()
    res = client.get("/api/health")
    assert res.status_code == 200
    assert res.get_json() == {"status": "ok", "rooms": 1, "connections": 0}


def test_room_state_unknown_code(client):
    res = client.get("/api/rooms/QQQQ")
    assert res.status_code == 404
    assert res.get_json() == {"error": "room_not_found"}


def test_room_state(client, registry):
    room = registry.create_room()
    room.add_player("Alice", is_host=True)

    res = client.get(f"/api/rooms/{room.code.lower()}")
    assert res.status_code == 200
    body = res.get_json()
    assert body["roomCode"] == room.code
    assert body["phase"] == "LOBBY"
    assert [p["name"] for p in body["players"]] == ["Alice"]
    assert body["players"][0]["isHost"] is True


def test_categories(client):
    res = client.get("/api/categories")
    assert res.status_code == 200
    assert "animals" in res.get_json()["categories"]
