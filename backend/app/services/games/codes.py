import random
import string
from typing import Callable, Optional

from .errors import ResourceExhausted

ROOM_CODE_ALPHABET = string.ascii_uppercase + string.digits
ROOM_CODE_LENGTH = 6


def generate_room_code(
    is_taken: Callable[[str], bool],
    length: int = ROOM_CODE_LENGTH,
    max_attempts: Optional[int] = 1000,
    rng: Optional[random.Random] = None,
) -> str:
    """Generate a short room code that ``is_taken`` does not already know.

    ``max_attempts=None`` retries forever; otherwise ResourceExhausted is
    raised once the attempts run out.
    """
    choices = (rng or random).choices
    attempts = 0
    while max_attempts is None or attempts < max_attempts:
        attempts += 1
        code = ''.join(choices(ROOM_CODE_ALPHABET, k=length))
        if not is_taken(code):
            return code
    raise ResourceExhausted()
