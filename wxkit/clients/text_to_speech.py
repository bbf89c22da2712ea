"""Google Cloud Text-to-Speech client wrapper."""

from __future__ import annotations

import base64
import binascii
from typing import Any, Dict

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from wxkit.core.config import SpeechSettings
from wxkit.core.exceptions import PayloadError, UpstreamError

SERVICE_NAME = "Google Text-to-Speech"

_EXTENSIONS = {
    "OGG_OPUS": "opus",
    "MP3": "mp3",
    "LINEAR16": "wav",
    "MULAW": "wav",
    "ALAW": "wav",
}


class SpeechClient:
    """Synthesize text into encoded audio using an API key."""

    def __init__(self, settings: SpeechSettings) -> None:
        self._settings = settings
        self._service: Any = None

    @property
    def file_extension(self) -> str:
        return _EXTENSIONS.get(self._settings.audio_encoding.upper(), "audio")

    def _get_service(self) -> Any:
        if self._service is None:
            self._service = build(
                "texttospeech",
                "v1",
                developerKey=self._settings.api_key,
                cache_discovery=False,
            )
        return self._service

    def build_request(self, text: str) -> Dict[str, Any]:
        return {
            "audioConfig": {
                "audioEncoding": self._settings.audio_encoding,
                "pitch": self._settings.pitch,
                "speakingRate": self._settings.speaking_rate,
            },
            "input": {"text": text},
            "voice": {
                "languageCode": self._settings.language_code,
                "name": self._settings.voice_name,
            },
        }

    def synthesize(self, text: str) -> bytes:
        """Return the decoded audio for ``text``."""
        service = self._get_service()
        try:
            result = service.text().synthesize(body=self.build_request(text)).execute()
        except HttpError as exc:
            raise UpstreamError(SERVICE_NAME, exc.resp.status, str(exc)) from exc

        audio = result.get("audioContent") if isinstance(result, dict) else None
        if not audio:
            raise PayloadError("Speech response did not include audio content.")
        try:
            return base64.b64decode(audio, validate=True)
        except binascii.Error as exc:
            raise PayloadError("Speech response audio is not valid base64.") from exc


__all__ = ["SpeechClient"]
