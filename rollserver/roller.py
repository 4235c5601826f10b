# rollserver/roller.py
import hashlib
import secrets
import time
from dataclasses import asdict, dataclass

SALT_BYTES = 8
FACES = 6
DEFAULT_CLIENT_ID = "anonymous"


class RollGenerationError(RuntimeError):
    """The random source could not supply a salt."""


@dataclass(frozen=True)
class RollRecord:
    number: int
    ts: int
    salt: str

    def as_dict(self) -> dict:
        return asdict(self)


def resolve_client_id(query_value: str | None, header_value: str | None) -> str:
    """client_id query param, then x-client-id header, then 'anonymous'.
    Empty strings count as absent."""
    for candidate in (query_value, header_value):
        if candidate:
            return str(candidate)
    return DEFAULT_CLIENT_ID


def number_from_digest(digest: bytes) -> int:
    v = int.from_bytes(digest[:4], "big")
    return (v % FACES) + 1


def roll_number(client_id: str, ts: int, salt: str) -> int:
    h = hashlib.sha256()
    h.update(client_id.encode("utf-8"))
    h.update(str(ts).encode("ascii"))
    h.update(salt.encode("ascii"))
    return number_from_digest(h.digest())


def new_salt() -> str:
    try:
        return secrets.token_bytes(SALT_BYTES).hex()
    except (OSError, NotImplementedError) as e:
        raise RollGenerationError(f"random source failed: {e}") from e


def generate_roll(client_id: str) -> RollRecord:
    ts = int(time.time())
    salt = new_salt()
    return RollRecord(number=roll_number(client_id, ts, salt), ts=ts, salt=salt)
