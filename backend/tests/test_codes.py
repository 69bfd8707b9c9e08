import random
import string

import pytest

from app.services.games.codes import generate_room_code
from app.services.games.errors import ResourceExhausted


def test_code_shape():
    code = generate_room_code(lambda c: False)
    assert len(code) == 6
    assert set(code) <= set(string.ascii_uppercase + string.digits)


def test_retries_until_free():
    taken = set()
    rng = random.Random(7)
    first = generate_room_code(lambda c: False, rng=random.Random(7))
    taken.add(first)
    second = generate_room_code(lambda c: c in taken, rng=rng)
    assert second != first


def test_gives_up_after_max_attempts():
    calls = []

    def always_taken(code):
        calls.append(code)
        return True

    with pytest.raises(ResourceExhausted):
        generate_room_code(always_taken, max_attempts=5)
    assert len(calls) == 5


def test_custom_length():
    assert len(generate_room_code(lambda c: False, length=4)) == 4
