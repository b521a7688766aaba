"""Speech backend adapter (Amazon Polly) and the batch synthesis dispatcher.

The dispatcher fans out one request per distinct sentence and joins the
results into a fingerprint -> audio mapping. It is all-or-nothing: the first
failing request aborts the batch and nothing partial is returned.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import closing
from typing import Dict, List, Mapping, Optional

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from .errors import SynthesisError, VoiceDataError
from .voices import Voice

logger = logging.getLogger(__name__)

ENGINE_NEURAL = "neural"
ENGINE_STANDARD = "standard"


def engine_name(neural: bool) -> str:
    return ENGINE_NEURAL if neural else ENGINE_STANDARD


class SpeechBackend:
    """Interface the generate pipeline needs from a speech service.

    ``catalog`` returns raw voice entries shaped like Polly's DescribeVoices
    items; ``list_voices`` converts every one of them.
    """

    async def catalog(self, language: Optional[str] = None) -> List[dict]:
        raise NotImplementedError

    async def list_voices(self, language: Optional[str] = None) -> List[Voice]:
        return [Voice.from_polly(entry) for entry in await self.catalog(language)]

    async def synthesize(self, text: str, voice_id: str, engine: str) -> bytes:
        raise NotImplementedError


class PollyBackend(SpeechBackend):
    """Amazon Polly through boto3.

    boto3 calls block, so each one runs in a worker thread via
    ``asyncio.to_thread`` and can be awaited independently.
    """

    def __init__(
        self,
        client=None,
        region: Optional[str] = None,
        output_format: str = "mp3",
    ) -> None:
        if client is None:
            client = boto3.client(
                "polly",
                region_name=region,
                config=BotoConfig(max_pool_connections=32),
            )
        self._client = client
        self.output_format = output_format

    async def catalog(self, language: Optional[str] = None) -> List[dict]:
        return await asyncio.to_thread(self._describe_voices, language)

    async def synthesize(self, text: str, voice_id: str, engine: str) -> bytes:
        return await asyncio.to_thread(self._synthesize_speech, text, voice_id, engine)

    def _describe_voices(self, language: Optional[str]) -> List[dict]:
        params = {"IncludeAdditionalLanguageCodes": False}
        if language:
            params["LanguageCode"] = language
        voices: List[dict] = []
        while True:
            try:
                response = self._client.describe_voices(**params)
            except (BotoCoreError, ClientError) as e:
                raise VoiceDataError(f"Unable to list voices: {e}") from e
            page = response.get("Voices")
            if page is None:
                raise VoiceDataError("No voices returned")
            voices.extend(page)
            token = response.get("NextToken")
            if not token:
                return voices
            params["NextToken"] = token

    def _synthesize_speech(self, text: str, voice_id: str, engine: str) -> bytes:
        try:
            response = self._client.synthesize_speech(
                Engine=engine,
                OutputFormat=self.output_format,
                Text=text,
                VoiceId=voice_id,
            )
        except (BotoCoreError, ClientError) as e:
            raise SynthesisError(f"Polly request failed: {e}") from e
        stream = response.get("AudioStream")
        if stream is None:
            raise SynthesisError("Unable to get bytes from result")
        with closing(stream):
            return stream.read()


async def _synthesize_one(
    backend: SpeechBackend, fingerprint: int, text: str, voice_id: str, engine: str
) -> bytes:
    logger.debug("Requesting %s audio for %d", engine, fingerprint)
    try:
        audio = await backend.synthesize(text, voice_id, engine)
    except SynthesisError as e:
        if e.fingerprint is None:
            e.fingerprint = fingerprint
        raise
    except Exception as e:
        raise SynthesisError(f"Synthesis failed for {fingerprint}: {e}", fingerprint=fingerprint) from e
    if not audio:
        raise SynthesisError(f"Empty audio returned for {fingerprint}", fingerprint=fingerprint)
    return audio


async def synthesize_many(
    backend: SpeechBackend,
    needs_tts: Mapping[int, str],
    voice: Voice,
    neural: bool = False,
) -> Dict[int, bytes]:
    """Synthesize every pending sentence concurrently.

    Args:
        backend: Speech service
        needs_tts: Sentence fingerprint -> sentence text
        voice: Selected voice
        neural: Use the neural engine instead of the standard one

    Returns:
        Sentence fingerprint -> audio bytes, one entry per request

    Raises:
        SynthesisError: If any request fails or returns no audio; requests
            still in flight are cancelled and no result is returned
    """
    if not needs_tts:
        return {}
    engine = engine_name(neural)
    tasks = {
        fp: asyncio.create_task(_synthesize_one(backend, fp, text, voice.id, engine))
        for fp, text in needs_tts.items()
    }
    try:
        await asyncio.gather(*tasks.values())
    except BaseException:
        for task in tasks.values():
            task.cancel()
        await asyncio.gather(*tasks.values(), return_exceptions=True)
        raise
    logger.debug("Synthesized %d sentences with %s", len(tasks), voice.id)
    return {fp: task.result() for fp, task in tasks.items()}
