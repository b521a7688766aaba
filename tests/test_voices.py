"""Tests for voice parsing, selection and listing."""

import pytest

from anki_parrot.errors import VoiceDataError, VoiceNotFoundError
from anki_parrot.voices import (
    Voice,
    format_voice,
    group_by_language,
    print_voices,
    select_voice,
    voices_with_id,
)


def polly_voice(**overrides):
    payload = {
        "Id": "Joanna",
        "Gender": "Female",
        "LanguageName": "US English",
        "LanguageCode": "en-US",
        "SupportedEngines": ["neural", "standard"],
    }
    payload.update(overrides)
    return payload


class TestVoiceFromPolly:
    """Test conversion of Polly DescribeVoices entries."""

    def test_full_entry(self):
        """Test a complete entry with neural support."""
        voice = Voice.from_polly(polly_voice())
        assert voice == Voice("Joanna", "Female", "US English", "en-US", neural=True)

    def test_standard_only(self):
        """Test that neural is false without a neural engine."""
        voice = Voice.from_polly(polly_voice(SupportedEngines=["standard"]))
        assert voice.neural is False

    def test_engine_match_is_case_insensitive(self):
        """Test engine names in any case."""
        assert Voice.from_polly(polly_voice(SupportedEngines=["NEURAL"])).neural

    def test_missing_engines(self):
        """Test that a missing engine list means standard only."""
        payload = polly_voice()
        del payload["SupportedEngines"]
        assert Voice.from_polly(payload).neural is False

    def test_missing_field_raises(self):
        """Test that incomplete entries are rejected."""
        payload = polly_voice()
        del payload["LanguageName"]
        with pytest.raises(VoiceDataError, match="language"):
            Voice.from_polly(payload)


class TestVoicesWithId:
    """Test converting only the catalog entries for one voice."""

    def test_ignores_incomplete_entries_for_other_voices(self):
        """Test that a broken entry elsewhere in the catalog is skipped."""
        broken = polly_voice(Id="Weird")
        del broken["LanguageName"]

        voices = voices_with_id([polly_voice(), broken], "joanna")

        assert [v.id for v in voices] == ["Joanna"]

    def test_incomplete_matching_entry_raises(self):
        """Test that the requested voice itself must be complete."""
        broken = polly_voice()
        del broken["Gender"]
        with pytest.raises(VoiceDataError, match="gender"):
            voices_with_id([broken], "Joanna")

    def test_no_match(self):
        """Test that an unknown ID yields no voices."""
        assert voices_with_id([polly_voice()], "Hans") == []


class TestSelectVoice:
    """Test voice selection by ID and capability."""

    def test_case_insensitive_match(self, catalog):
        """Test that IDs match regardless of case."""
        assert select_voice(catalog, "joanna").id == "Joanna"
        assert select_voice(catalog, "MATTHEW").id == "Matthew"

    def test_neural_required(self, catalog):
        """Test that a standard-only voice is rejected for neural."""
        with pytest.raises(VoiceNotFoundError) as exc:
            select_voice(catalog, "Hans", neural=True)
        assert "neural" in str(exc.value)

    def test_standard_voice_without_neural(self, catalog):
        """Test that standard voices are fine when neural isn't asked for."""
        assert select_voice(catalog, "hans").code == "de-DE"

    def test_unknown_voice(self, catalog):
        """Test that an unknown ID raises VoiceNotFoundError."""
        with pytest.raises(VoiceNotFoundError, match="Couldn't find voice Nobody"):
            select_voice(catalog, "Nobody")


class TestListing:
    """Test list-voices formatting."""

    def test_group_by_language_sorted(self, catalog):
        """Test that groups are keyed and ordered by language."""
        groups = group_by_language(catalog)
        assert list(groups) == ["German", "US English"]
        assert [v.id for v in groups["US English"]] == ["Joanna", "Matthew"]

    def test_format_voice(self, catalog):
        """Test gender glyph, padding and neural label."""
        assert format_voice(catalog[0]) == "♀ Joanna          (supports neural)"
        assert format_voice(catalog[2]) == "♂ Hans            (standard only)"

    def test_unknown_gender(self):
        """Test the fallback glyph."""
        voice = Voice("Zed", "Other", "X", "xx-XX")
        assert format_voice(voice).startswith("? Zed")

    def test_print_voices(self, catalog, capsys):
        """Test the printed listing."""
        print_voices(catalog)
        out = capsys.readouterr().out
        assert "===== German" in out
        assert "===== US English" in out
        assert out.index("===== German") < out.index("===== US English")
        assert "Matthew" in out
