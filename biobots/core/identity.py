import random
import uuid

_UUID_TEMPLATE = "xxxxxxxx-xxxx-4xxx-yxxx-xxxxxxxxxxxx"

def new_id() -> str:
    """Returns a unique v4-style identifier string.

    Uses the OS randomness source through ``uuid.uuid4``. If the platform has
    none, falls back to a pseudo-random identifier of the same shape.
    """
    try:
        return str(uuid.uuid4())
    except NotImplementedError: # os.urandom unavailable
        return _pseudo_random_id()

def _pseudo_random_id() -> str:
    chars = []
    for c in _UUID_TEMPLATE:
        if c == "x":
            chars.append(format(random.randrange(16), "x"))
        elif c == "y":
            chars.append(format(random.randrange(16) & 0x3 | 0x8, "x"))
        else:
            chars.append(c)
    return "".join(chars)

def entity_seed(entity_id: str) -> int:
    """Deterministic non-negative seed for an identifier.

    A 32-bit ``hash * 31 + char`` rolling hash, so the same id gives the same
    seed on every run and platform. Used to phase-shift periodic motion.
    """
    h = 0
    for ch in entity_id:
        h = (h * 31 + ord(ch)) & 0xFFFFFFFF
    if h >= 0x80000000: # Interpret as signed 32-bit
        h -= 0x100000000
    return abs(h)
