import random
import re

import pytest

from sketchspy.game.errors import RoomNotFound
from sketchspy.game.service import RoomRegistry, generate_room_code, normalize_room_code


class FakeTimer:
    def __init__(self):
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


def test_room_codes_are_four_uppercase_letters():
    rng = random.Random(0)
    for _ in range(100):
        assert re.fullmatch(r"[A-Z]{4}", generate_room_code(rng))


def test_normalize_room_code():
    assert normalize_room_code(" abcd ") == "ABCD"
    assert normalize_room_code(None) == ""


def test_created_rooms_get_unique_codes():
    registry = RoomRegistry(rng=random.Random(3))
    codes = {registry.create_room().code for _ in range(200)}
    assert len(codes) == 200
    assert len(registry) == 200


def test_lookup_is_case_insensitive():
    registry = RoomRegistry(rng=random.Random(0))
    room = registry.create_room()
    assert registry.get_room(room.code.lower()) is room
    assert room.code.lower() in registry


def test_require_room_raises_for_unknown_code():
    registry = RoomRegistry(rng=random.Random(0))
    assert registry.get_room("ZZZZ") is None
    with pytest.raises(RoomNotFound):
        registry.require_room("ZZZZ")


def test_delete_room_cancels_its_timer():
    registry = RoomRegistry(rng=random.Random(0))
    room = registry.create_room()
    timer = FakeTimer()
    room.set_timer(timer)

    assert registry.delete_room(room.code)
    assert timer.cancelled
    assert room.code not in registry
    assert not registry.delete_room(room.code)


def test_rooms_share_the_word_bank_and_limits():
    registry = RoomRegistry(rng=random.Random(0), min_players=2, max_players=4)
    room = registry.create_room()
    assert room._word_bank is registry.word_bank
    assert (room.min_players, room.max_players) == (2, 4)
    assert registry.list_rooms() == [room]


def test_seeded_registry_is_reproducible():
    config = {"RANDOM_SEED": "abc", "MIN_PLAYERS": 3, "MAX_PLAYERS": 8}
    first = RoomRegistry.from_config(config)
    second = RoomRegistry.from_config(config)
    assert [first.create_room().code for _ in range(5)] == [second.create_room().code for _ in range(5)]


def test_unseeded_registry_reads_limits_from_config():
    registry = RoomRegistry.from_config({"RANDOM_SEED": "", "MIN_PLAYERS": "4", "MAX_PLAYERS": "6"})
    room = registry.create_room()
    assert (room.min_players, room.max_players) == (4, 6)
