import random

import pytest

from sketchspy.game.errors import CategoryNotFound
from sketchspy.game.words import WordBank


def test_builtin_categories_are_available():
    categories = WordBank().categories()
    for name in ("animals", "food", "objects", "places", "actions", "random"):
        assert name in categories


def test_unknown_category_raises_with_descriptive_message():
    with pytest.raises(CategoryNotFound, match="Category 'nonexistent' not found"):
        WordBank().words_for("nonexistent")


def test_random_word_comes_from_the_category():
    bank = WordBank()
    word = bank.random_word("animals", random.Random(0))
    assert word in bank.words_for("animals")


def test_random_word_is_reproducible_with_a_seed():
    bank = WordBank()
    assert bank.random_word("food", random.Random(5)) == bank.random_word("food", random.Random(5))


def test_random_word_varies():
    bank = WordBank()
    rng = random.Random(1)
    assert len({bank.random_word("animals", rng) for _ in range(50)}) > 1


def test_add_category():
    bank = WordBank()
    bank.add_category("space", [" comet ", "nebula", ""])
    assert bank.words_for("space") == ["comet", "nebula"]
    with pytest.raises(ValueError):
        bank.add_category("empty", [])


def test_custom_bank_does_not_share_state_with_defaults():
    bank = WordBank({"tiny": ["one"]})
    assert bank.categories() == ["tiny"]
    assert "animals" in WordBank().categories()
