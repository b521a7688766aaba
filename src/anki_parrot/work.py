"""Work items and the deduplicating bundle builder.

A run reads every source row once, drops exact duplicate rows (and, when
asked, rows whose audio already exists), and records one synthesis request
per distinct sentence. Rows that share a sentence but differ elsewhere are
all kept and later point at the same audio file.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Sequence, Set, Tuple

from .fingerprint import (
    audio_filename,
    fingerprint_row,
    fingerprint_sentence,
    sound_reference,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkItem:
    """One accepted source row.

    Attributes:
        seq: 0-based position of the row in the source
        fields: Original field values
        sentence_fingerprint: Hash of field 0
        row_fingerprint: Hash of every field in order
        filename: Audio file name derived from the sentence fingerprint
    """
    seq: int
    fields: Tuple[str, ...]
    sentence_fingerprint: int
    row_fingerprint: int
    filename: str

    @classmethod
    def from_row(cls, seq: int, fields: Sequence[str]) -> "WorkItem":
        fields = tuple(fields)
        sentence_fp = fingerprint_sentence(fields)
        return cls(
            seq=seq,
            fields=fields,
            sentence_fingerprint=sentence_fp,
            row_fingerprint=fingerprint_row(fields),
            filename=audio_filename(sentence_fp),
        )

    @property
    def sentence(self) -> str:
        return self.fields[0]

    def with_sound(self) -> List[str]:
        """Return a copy of the fields with the sound reference appended."""
        return list(self.fields) + [sound_reference(self.filename)]


@dataclass
class WorkBundle:
    needs_tts: Dict[int, str] = field(default_factory=dict)
    work_items: List[WorkItem] = field(default_factory=list)
    duplicate_rows: int = 0
    existing_rows: int = 0

    def add_work_item(self, item: WorkItem) -> None:
        # First accepted row for a sentence wins the synthesis entry.
        self.needs_tts.setdefault(item.sentence_fingerprint, item.sentence)
        self.work_items.append(item)

    def pending(self) -> Dict[int, str]:
        """Synthesis requests in fingerprint order."""
        return {fp: self.needs_tts[fp] for fp in sorted(self.needs_tts)}


def build_work_bundle(
    rows: Iterable[Sequence[str]],
    audio_dir: str | Path,
    skip_existing: bool = False,
) -> WorkBundle:
    """Filter source rows into a WorkBundle.

    A row is accepted when its row fingerprint has not been seen earlier in
    this call and, with ``skip_existing``, its audio file is not already in
    ``audio_dir``. Rejected rows are dropped without error.

    Args:
        rows: Parsed rows in source order (each non-empty)
        audio_dir: Directory the audio files are written to
        skip_existing: Drop rows whose audio file already exists

    Returns:
        WorkBundle holding accepted rows in source order
    """
    audio_dir = Path(audio_dir)
    bundle = WorkBundle()
    seen: Set[int] = set()
    for seq, fields in enumerate(rows):
        item = WorkItem.from_row(seq, fields)
        if skip_existing and (audio_dir / item.filename).exists():
            bundle.existing_rows += 1
            continue
        if item.row_fingerprint in seen:
            bundle.duplicate_rows += 1
            continue
        seen.add(item.row_fingerprint)
        bundle.add_work_item(item)

    logger.debug(
        "Accepted %d rows (%d duplicate, %d existing), %d sentences need audio",
        len(bundle.work_items),
        bundle.duplicate_rows,
        bundle.existing_rows,
        len(bundle.needs_tts),
    )
    return bundle
