"""Error types raised by the generate and list-voices commands.

Every error here is terminal for a run: the CLI prints the message and exits
non-zero. Plain I/O failures surface as the builtin ``OSError`` family.
"""

from __future__ import annotations

from typing import Optional


class ParrotError(Exception):
    """Base class for anki-parrot failures."""


class RowParseError(ParrotError):
    """A source row was empty or could not be parsed."""

    def __init__(self, message: str, line: Optional[int] = None) -> None:
        if line is not None:
            message = f"{message} (line {line})"
        super().__init__(message)
        self.line = line


class VoiceDataError(ParrotError):
    """The voice catalog returned nothing usable."""


class VoiceNotFoundError(ParrotError):
    def __init__(self, voice_id: str, neural: bool = False) -> None:
        suffix = " with neural support" if neural else ""
        super().__init__(f"Couldn't find voice {voice_id}{suffix}")
        self.voice_id = voice_id
        self.neural = neural


class SynthesisError(ParrotError):
    """A synthesis call failed or returned no audio."""

    def __init__(self, message: str, fingerprint: Optional[int] = None) -> None:
        super().__init__(message)
        self.fingerprint = fingerprint


class MissingResultError(ParrotError):
    """An accepted row has no synthesized audio for its sentence."""

    def __init__(self, fingerprint: int) -> None:
        super().__init__(f"Couldn't find result for {fingerprint}")
        self.fingerprint = fingerprint
