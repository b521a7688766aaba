"""CLI entrypoint for anki-parrot.

Usage:
  ankiparrot generate sentences.csv cards.csv media/ --voice Joanna --neural
  ankiparrot list-voices --language en-US
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from pathlib import Path
from typing import List

from botocore.exceptions import BotoCoreError

from .errors import ParrotError
from .generate import GenerateOptions, run_generate
from .report import print_summary
from .tts import PollyBackend
from .voices import print_voices

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = "parrot.json"


def load_config(path: str | Path) -> dict:
    path = Path(path)
    if not path.exists():
        # Default config
        return {
            "region": None,
            "voice": None,
            "neural": False,
            "tabs": False,
            "skip_existing": False,
            "has_header": False,
        }
    try:
        cfg = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in config file {path}: {e}")
    if not isinstance(cfg, dict):
        raise ValueError(f"Config file {path} must contain a JSON object")
    return cfg


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _flag(value: bool | None, cfg: dict, key: str) -> bool:
    if value is not None:
        return value
    configured = cfg.get(key, False)
    if configured is None:
        return False
    if not isinstance(configured, bool):
        raise ValueError(f"Config key \"{key}\" must be true or false, got {configured!r}")
    return configured


def cmd_generate(args: argparse.Namespace) -> int:
    """Generate cards with audio for every distinct sentence."""
    try:
        cfg = load_config(args.config)
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    voice = args.voice or cfg.get("voice")
    if not voice:
        print("Error: --voice is required (or set \"voice\" in the config file)")
        return 1

    try:
        options = GenerateOptions(
            source=Path(args.source),
            target=Path(args.target),
            audio_dir=Path(args.audio_directory),
            voice=voice,
            neural=_flag(args.neural, cfg, "neural"),
            tabs=_flag(args.tabs, cfg, "tabs"),
            skip_existing=_flag(args.skip_existing, cfg, "skip_existing"),
            has_header=_flag(args.header, cfg, "has_header"),
        )
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    try:
        backend = PollyBackend(region=args.region or cfg.get("region"))
        summary = asyncio.run(run_generate(backend, options))
    except (ParrotError, OSError, BotoCoreError) as e:
        logger.debug("generate failed", exc_info=True)
        print(f"Error: {e}")
        return 1

    print_summary(summary)
    print(f"Wrote cards: {options.target}")
    return 0


def cmd_list_voices(args: argparse.Namespace) -> int:
    """List the available voices grouped by language."""
    try:
        cfg = load_config(args.config)
        backend = PollyBackend(region=args.region or cfg.get("region"))
        voices = asyncio.run(backend.list_voices(args.language))
    except (ParrotError, ValueError, OSError, BotoCoreError) as e:
        print(f"Error: {e}")
        return 1
    print_voices(voices)
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="ankiparrot", description="Generate Anki cards with Amazon Polly audio"
    )
    p.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    p.add_argument(
        "--config",
        default=DEFAULT_CONFIG,
        help=f"Path to config JSON (optional; defaults will be used if missing, default: {DEFAULT_CONFIG})",
    )
    p.add_argument("--region", help="AWS region for Polly (default: boto3 configuration)")
    sub = p.add_subparsers(dest="cmd", required=True)

    gen = sub.add_parser("generate", help="Generate Anki cards using a particular Polly voice")
    gen.add_argument("source", help="Source file (sentence first, then any other fields)")
    gen.add_argument("target", help="Target file")
    gen.add_argument("audio_directory", help="Directory where audio files are written")
    gen.add_argument("--voice", help="Amazon Polly voice ID")
    gen.add_argument(
        "--neural",
        action="store_true",
        default=None,
        help="Use the neural voice (voice must support it)",
    )
    gen.add_argument("--tabs", action="store_true", default=None, help="TSV instead of CSV")
    gen.add_argument(
        "--skip-existing",
        action="store_true",
        default=None,
        help="Drop rows whose audio file already exists in the audio directory",
    )
    gen.add_argument(
        "--header",
        action="store_true",
        default=None,
        help="First row is a header; it is copied to the target with an Audio column",
    )
    gen.set_defaults(func=cmd_generate)

    voices = sub.add_parser("list-voices", help="List all available Polly voices")
    voices.add_argument("--language", "-l", help="Only show voices for this language code")
    voices.set_defaults(func=cmd_list_voices)

    return p


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)
    return args.func(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
