"""Shared fixtures: an in-memory speech backend and a small voice catalog."""

import asyncio

import pytest

from anki_parrot.tts import SpeechBackend
from anki_parrot.voices import Voice


CATALOG = [
    Voice(id="Joanna", gender="Female", language="US English", code="en-US", neural=True),
    Voice(id="Matthew", gender="Male", language="US English", code="en-US", neural=True),
    Voice(id="Hans", gender="Male", language="German", code="de-DE", neural=False),
]


class FakeBackend(SpeechBackend):
    """Speech backend that returns deterministic bytes and records calls."""

    def __init__(self, voices=None, fail_on=(), empty_on=(), delays=None, extra_entries=()):
        self.voices = list(CATALOG if voices is None else voices)
        self.extra_entries = list(extra_entries)
        self.fail_on = set(fail_on)
        self.empty_on = set(empty_on)
        self.delays = delays or {}
        self.calls = []
        self.voice_queries = []

    async def catalog(self, language=None):
        self.voice_queries.append(language)
        entries = [polly_entry(v) for v in self.voices] + self.extra_entries
        return [e for e in entries if language is None or e.get("LanguageCode") == language]

    async def synthesize(self, text, voice_id, engine):
        self.calls.append((text, voice_id, engine))
        delay = self.delays.get(text, 0)
        if delay:
            await asyncio.sleep(delay)
        if text in self.fail_on:
            raise RuntimeError(f"backend exploded on {text}")
        if text in self.empty_on:
            return b""
        return audio_for(text, voice_id, engine)


def polly_entry(voice):
    engines = ["neural", "standard"] if voice.neural else ["standard"]
    return {
        "Id": voice.id,
        "Gender": voice.gender,
        "LanguageName": voice.language,
        "LanguageCode": voice.code,
        "SupportedEngines": engines,
    }


def audio_for(text, voice_id="Joanna", engine="standard"):
    return f"{voice_id}:{engine}:{text}".encode("utf-8")


@pytest.fixture
def catalog():
    return list(CATALOG)


@pytest.fixture
def make_backend():
    """Factory fixture for FakeBackend with custom failure behavior."""
    return FakeBackend


@pytest.fixture
def fake_backend():
    return FakeBackend()


@pytest.fixture
def example_rows():
    """Two sentences, one exact duplicate row, one shared sentence."""
    return [
        ["Hello world", "tag1"],
        ["Hello world", "tag2"],
        ["Goodbye", "tag1"],
        ["Hello world", "tag1"],
    ]
