"""Voice catalog model, selection and listing."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping

from .errors import VoiceDataError, VoiceNotFoundError

_GENDER_GLYPHS = {"male": "♂", "female": "♀"}


@dataclass(frozen=True, order=True)
class Voice:
    """A selectable synthesis voice.

    Attributes:
        id: Backend voice identifier (e.g. "Joanna")
        gender: Gender label as reported by the backend
        language: Display language (e.g. "US English")
        code: Language code (e.g. "en-US")
        neural: Whether the voice supports the neural engine
    """
    id: str
    gender: str
    language: str
    code: str
    neural: bool = False

    @classmethod
    def from_polly(cls, payload: Mapping) -> "Voice":
        """Build a Voice from one Polly DescribeVoices entry.

        Raises:
            VoiceDataError: If the entry lacks an id, gender, language or code
        """
        values = {
            "id": payload.get("Id"),
            "gender": payload.get("Gender"),
            "language": payload.get("LanguageName"),
            "code": payload.get("LanguageCode"),
        }
        missing = sorted(k for k, v in values.items() if not v)
        if missing:
            raise VoiceDataError(
                f"Unable to convert voice {values['id'] or '<unknown>'}: missing {', '.join(missing)}"
            )
        engines = payload.get("SupportedEngines") or []
        neural = any(str(e).lower() == "neural" for e in engines)
        return cls(neural=neural, **values)


def voices_with_id(entries: Iterable[Mapping], voice_id: str) -> List[Voice]:
    """Convert only the catalog entries whose Id matches ``voice_id``.

    Entries for other voices are never converted, so an incomplete entry
    elsewhere in the catalog does not matter.
    """
    wanted = voice_id.lower()
    return [
        Voice.from_polly(entry)
        for entry in entries
        if str(entry.get("Id") or "").lower() == wanted
    ]


def select_voice(voices: Iterable[Voice], voice_id: str, neural: bool = False) -> Voice:
    """Pick the voice matching ``voice_id`` (case-insensitive).

    When ``neural`` is set the matched voice must support the neural engine.

    Raises:
        VoiceNotFoundError: If no voice satisfies both conditions
    """
    wanted = voice_id.lower()
    for voice in voices:
        if voice.id.lower() != wanted:
            continue
        if neural and not voice.neural:
            continue
        return voice
    raise VoiceNotFoundError(voice_id, neural=neural)


def group_by_language(voices: Iterable[Voice]) -> Dict[str, List[Voice]]:
    groups: Dict[str, List[Voice]] = {}
    for voice in voices:
        groups.setdefault(voice.language, []).append(voice)
    return {lang: groups[lang] for lang in sorted(groups)}


def format_voice(voice: Voice) -> str:
    glyph = _GENDER_GLYPHS.get(voice.gender.lower(), "?")
    support = "supports neural" if voice.neural else "standard only"
    return f"{glyph} {voice.id:15} ({support})"


def print_voices(voices: Iterable[Voice]) -> None:
    for language, group in group_by_language(voices).items():
        print(f"\n===== {language}\n")
        for voice in group:
            print(format_voice(voice))
