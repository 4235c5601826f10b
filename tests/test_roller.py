import dataclasses
import hashlib

import pytest

from rollserver import roller
from rollserver.roller import (
    RollGenerationError,
    RollRecord,
    generate_roll,
    number_from_digest,
    resolve_client_id,
    roll_number,
)


def test_generate_roll_stays_in_range_and_hits_every_face():
    seen = set()
    for i in range(10_000):
        record = generate_roll(f"client-{i % 7}")
        assert 1 <= record.number <= 6
        seen.add(record.number)
    assert seen == {1, 2, 3, 4, 5, 6}


def test_roll_number_matches_manual_digest():
    client_id, ts, salt = "alice", 1700000000, "0011223344556677"
    digest = hashlib.sha256(f"{client_id}{ts}{salt}".encode()).digest()
    expected = int.from_bytes(digest[:4], "big") % 6 + 1

    assert roll_number(client_id, ts, salt) == expected
    assert roll_number(client_id, ts, salt) == roll_number(client_id, ts, salt)


def test_number_from_digest_uses_first_four_bytes_big_endian():
    assert number_from_digest(b"\x00\x00\x00\x00" + b"\xff" * 28) == 1
    assert number_from_digest(b"\x00\x00\x00\x05" + b"\x00" * 28) == 6
    assert number_from_digest(b"\x00\x00\x01\x00") == 256 % 6 + 1


def test_generate_roll_record_is_consistent():
    record = generate_roll("bob")
    assert len(record.salt) == 16
    int(record.salt, 16)
    assert record.number == roll_number("bob", record.ts, record.salt)
    assert record.as_dict() == {"number": record.number, "ts": record.ts, "salt": record.salt}


def test_salts_are_fresh_per_call():
    salts = {generate_roll("bob").salt for _ in range(200)}
    assert len(salts) == 200


def test_roll_record_is_immutable():
    record = RollRecord(number=3, ts=1, salt="00")
    with pytest.raises(dataclasses.FrozenInstanceError):
        record.number = 4


@pytest.mark.parametrize(
    "query, header, expected",
    [
        ("alice", "bob", "alice"),
        (None, "bob", "bob"),
        ("", "bob", "bob"),
        (None, None, "anonymous"),
        ("", "", "anonymous"),
    ],
)
def test_resolve_client_id_fallback_order(query, header, expected):
    assert resolve_client_id(query, header) == expected


def test_entropy_failure_raises_roll_generation_error(monkeypatch):
    def broken(n):
        raise OSError("no entropy")

    monkeypatch.setattr(roller.secrets, "token_bytes", broken)
    with pytest.raises(RollGenerationError):
        generate_roll("alice")
