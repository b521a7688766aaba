"""Content fingerprints for sentences and whole rows.

Fingerprints are 64-bit BLAKE2b digests read as unsigned integers. They key
the dedup bookkeeping and name the audio files, so they must be stable across
processes (unlike the builtin ``hash``).
"""

from __future__ import annotations

import hashlib
from typing import Sequence

AUDIO_PREFIX = "parrot"
AUDIO_EXTENSION = "mp3"

# 0xFF never occurs in UTF-8, so it cleanly terminates each field.
_FIELD_END = b"\xff"


def _new_hasher():
    return hashlib.blake2b(digest_size=8)


def _digest(hasher) -> int:
    return int.from_bytes(hasher.digest(), "big")


def _feed(hasher, field: str) -> None:
    hasher.update(field.encode("utf-8"))
    hasher.update(_FIELD_END)


def fingerprint_sentence(fields: Sequence[str]) -> int:
    """Hash the sentence column (field 0) only."""
    hasher = _new_hasher()
    _feed(hasher, fields[0])
    return _digest(hasher)


def fingerprint_row(fields: Sequence[str]) -> int:
    """Hash every field in order.

    Single-field rows share the sentence fingerprint. Each field is fed
    separately, so ``["ab", "c"]`` and ``["a", "bc"]`` hash differently.
    """
    if len(fields) <= 1:
        return fingerprint_sentence(fields)
    hasher = _new_hasher()
    for field in fields:
        _feed(hasher, field)
    return _digest(hasher)


def audio_filename(sentence_fingerprint: int) -> str:
    return f"{AUDIO_PREFIX}_{sentence_fingerprint}.{AUDIO_EXTENSION}"


def sound_reference(filename: str) -> str:
    """Anki media reference for an audio file."""
    return f"[sound:{filename}]"
