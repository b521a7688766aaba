"""Generate Anki rows with synthesized audio.

Flow: read rows -> build the deduplicated work bundle -> select the voice ->
synthesize each distinct sentence once -> write audio files and the target
rows in source order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional, Set

import aiofiles

from .errors import MissingResultError
from .ingest import read_rows, write_rows
from .tts import SpeechBackend, synthesize_many
from .voices import select_voice, voices_with_id
from .work import WorkBundle, build_work_bundle

logger = logging.getLogger(__name__)

AUDIO_COLUMN = "Audio"


@dataclass
class GenerateOptions:
    source: Path
    target: Path
    audio_dir: Path
    voice: str
    neural: bool = False
    tabs: bool = False
    skip_existing: bool = False
    has_header: bool = False


@dataclass
class GenerateSummary:
    rows_read: int = 0
    rows_written: int = 0
    duplicate_rows: int = 0
    existing_rows: int = 0
    synthesis_calls: int = 0
    audio_files: int = 0
    voice: str = ""


async def emit_rows(
    bundle: WorkBundle,
    results: Mapping[int, bytes],
    audio_dir: str | Path,
) -> List[List[str]]:
    """Write audio for each accepted row and return the output rows.

    Rows come back in source order, each with a ``[sound:...]`` field
    appended. Audio for a fingerprint is written once even when several rows
    share it.

    Raises:
        MissingResultError: If a row's sentence has no synthesized audio
    """
    audio_dir = Path(audio_dir)
    written: Set[int] = set()
    output: List[List[str]] = []
    for item in bundle.work_items:
        audio = results.get(item.sentence_fingerprint)
        if audio is None:
            raise MissingResultError(item.sentence_fingerprint)
        if item.sentence_fingerprint not in written:
            path = audio_dir / item.filename
            async with aiofiles.open(path, "wb") as f:
                await f.write(audio)
            written.add(item.sentence_fingerprint)
            logger.debug("Wrote %s (%d bytes)", path, len(audio))
        output.append(item.with_sound())
    return output


async def run_generate(backend: SpeechBackend, options: GenerateOptions) -> GenerateSummary:
    header, rows = read_rows(options.source, tabs=options.tabs, has_header=options.has_header)
    audio_dir = Path(options.audio_dir)
    bundle = build_work_bundle(rows, audio_dir, skip_existing=options.skip_existing)

    catalog = await backend.catalog(None)
    voice = select_voice(
        voices_with_id(catalog, options.voice), options.voice, neural=options.neural
    )
    logger.info("Using voice %s (%s)", voice.id, voice.language)

    results = await synthesize_many(backend, bundle.pending(), voice, neural=options.neural)

    audio_dir.mkdir(parents=True, exist_ok=True)
    output = await emit_rows(bundle, results, audio_dir)
    out_header: Optional[List[str]] = None
    if header is not None:
        out_header = list(header) + [AUDIO_COLUMN]
    write_rows(options.target, output, tabs=options.tabs, header=out_header)

    return GenerateSummary(
        rows_read=len(rows),
        rows_written=len(output),
        duplicate_rows=bundle.duplicate_rows,
        existing_rows=bundle.existing_rows,
        synthesis_calls=len(results),
        audio_files=len(results),
        voice=voice.id,
    )
