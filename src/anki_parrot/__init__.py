"""anki-parrot: Anki cards with synthesized sentence audio.

Reads sentence rows, synthesizes each distinct sentence once with Amazon
Polly, and writes the rows back out with a ``[sound:...]`` field appended.
"""

__all__ = [
    "fingerprint",
    "work",
    "ingest",
    "voices",
    "tts",
    "generate",
    "report",
]
