"""Run summary printing."""

from __future__ import annotations

from .generate import GenerateSummary


def print_summary(summary: GenerateSummary) -> None:
    """Print counts for a finished generate run.

    Args:
        summary: Counters collected by ``run_generate``
    """
    print("Generate Summary:")
    print(f"  Voice:                 {summary.voice}")
    print(f"  Rows read:             {summary.rows_read}")
    print(f"  Duplicate rows:        {summary.duplicate_rows}")
    if summary.existing_rows:
        print(f"  Existing audio:        {summary.existing_rows}")
    print(f"  Rows written:          {summary.rows_written}")
    print(f"  Synthesis calls:       {summary.synthesis_calls}")
    print(f"  Audio files written:   {summary.audio_files}")
