from __future__ import annotations

import base64
from pathlib import Path
from typing import Any, Dict, List

import httplib2
import httpx
import pytest
from googleapiclient.errors import HttpError

from wxkit.clients import ForecastDiscussionClient, SpeechClient
from wxkit.clients import text_to_speech
from wxkit.clients.nws_forecast import extract_product_text
from wxkit.core.config import ForecastSettings, SpeechSettings
from wxkit.core.exceptions import PayloadError, UpstreamError
from wxkit.schemas import DiscussionSection
from wxkit.services import ForecastDiscussionService, split_discussion
from wxkit.utils.http import RetryConfig

DISCUSSION = (
    "000\n"
    "FXUS61 KPHI 171900\n"
    "AFDPHI\n\n"
    "Area Forecast Discussion\n"
    ".SYNOPSIS...High pressure builds in from the west.\n\n"
    "&&\n\n"
    ".SHORT TERM /THROUGH SATURDAY/...\n"
    "Clear skies and light winds.\n\n"
    ".LONG TERM /SUNDAY THROUGH THURSDAY/...\n"
    "Warming trend into midweek.\n\n"
    ".AVIATION /19Z FRIDAY THROUGH TUESDAY/...\n"
    "VFR.\n"
)

PAGE = (
    "<html><body>"
    '<pre class="glossaryProduct">navigation</pre>'
    f'<pre class="glossaryProduct" id="proddiff">{DISCUSSION}</pre>'
    "</body></html>"
)


class FakeSpeech:
    file_extension = "opus"

    def __init__(self) -> None:
        self.texts: List[str] = []

    def synthesize(self, text: str) -> bytes:
        self.texts.append(text)
        return f"audio:{len(self.texts)}".encode()


def _forecast_client(handler) -> ForecastDiscussionClient:
    return ForecastDiscussionClient(
        ForecastSettings(),
        httpx.Client(transport=httpx.MockTransport(handler)),
        retry_config=RetryConfig(attempts=1),
    )


def test_extract_product_text_targets_element_id() -> None:
    assert extract_product_text(PAGE) == DISCUSSION
    assert extract_product_text("<pre>no id</pre>") is None


def test_extract_product_text_unescapes_entities() -> None:
    assert extract_product_text('<pre id="proddiff">A &amp; B</pre>') == "A & B"


def test_split_discussion_returns_three_sections() -> None:
    sections = split_discussion(DISCUSSION, "phi")

    assert [section.name for section in sections] == ["overview", "short_term", "long_term"]
    assert "High pressure builds" in sections[0].text
    assert "Clear skies" in sections[1].text
    assert "Warming trend" in sections[2].text
    assert "VFR" not in sections[2].text


def test_split_discussion_requires_every_section() -> None:
    truncated = DISCUSSION.split(".AVIATION")[0]

    with pytest.raises(PayloadError, match="long term"):
        split_discussion(truncated, "PHI")


def test_fetch_discussion_requests_text_product() -> None:
    requests: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, text=PAGE)

    assert _forecast_client(handler).fetch_discussion("okx") == DISCUSSION
    params = requests[0].url.params
    assert requests[0].url.path == "/product.php"
    assert params["site"] == "OKX"
    assert params["issuedby"] == "OKX"
    assert params["product"] == "AFD"
    assert params["format"] == "TXT"


def test_fetch_discussion_without_product_is_payload_error() -> None:
    client = _forecast_client(lambda request: httpx.Response(200, text="<html></html>"))

    with pytest.raises(PayloadError):
        client.fetch_discussion()


def test_fetch_discussion_error_status() -> None:
    client = _forecast_client(lambda request: httpx.Response(404, text="missing"))

    with pytest.raises(UpstreamError) as excinfo:
        client.fetch_discussion()

    assert excinfo.value.status_code == 404


def test_service_writes_one_audio_file_per_section(tmp_path: Path) -> None:
    speech = FakeSpeech()
    service = ForecastDiscussionService(
        _forecast_client(lambda request: httpx.Response(200, text=PAGE)), speech
    )

    sections = service.fetch_sections("PHI")
    written = service.synthesize(sections, tmp_path / "audio")

    assert [path.name for path in written] == ["afd-1.opus", "afd-2.opus", "afd-3.opus"]
    assert written[2].read_bytes() == b"audio:3"
    assert speech.texts == [section.text for section in sections]


def test_service_without_speech_client_refuses_to_synthesize(tmp_path: Path) -> None:
    service = ForecastDiscussionService(_forecast_client(lambda request: httpx.Response(200)))

    with pytest.raises(RuntimeError):
        service.synthesize([DiscussionSection(name="overview", text="x")], tmp_path)


class _FakeRequest:
    def __init__(self, outcome: Any) -> None:
        self._outcome = outcome

    def execute(self) -> Any:
        if isinstance(self._outcome, Exception):
            raise self._outcome
        return self._outcome


class _FakeTextResource:
    def __init__(self, outcome: Any) -> None:
        self.outcome = outcome
        self.bodies: List[Dict[str, Any]] = []

    def synthesize(self, body: Dict[str, Any]) -> _FakeRequest:
        self.bodies.append(body)
        return _FakeRequest(self.outcome)


class _FakeService:
    def __init__(self, outcome: Any) -> None:
        self.resource = _FakeTextResource(outcome)

    def text(self) -> _FakeTextResource:
        return self.resource


@pytest.fixture
def speech_settings() -> SpeechSettings:
    return SpeechSettings(api_key="tts-key")


def _patch_build(monkeypatch: pytest.MonkeyPatch, outcome: Any) -> Dict[str, Any]:
    captured: Dict[str, Any] = {}

    def fake_build(service_name: str, version: str, **kwargs: Any) -> _FakeService:
        captured.update(kwargs, service_name=service_name, version=version)
        captured["service"] = _FakeService(outcome)
        return captured["service"]

    monkeypatch.setattr(text_to_speech, "build", fake_build)
    return captured


def test_speech_client_decodes_audio(monkeypatch, speech_settings) -> None:
    captured = _patch_build(
        monkeypatch, {"audioContent": base64.b64encode(b"OggS-data").decode("ascii")}
    )
    client = SpeechClient(speech_settings)

    assert client.synthesize("Clear skies.") == b"OggS-data"
    assert client.file_extension == "opus"
    assert captured["service_name"] == "texttospeech"
    assert captured["developerKey"] == "tts-key"
    body = captured["service"].resource.bodies[0]
    assert body["input"] == {"text": "Clear skies."}
    assert body["voice"] == {"languageCode": "en-US", "name": "en-US-Wavenet-H"}
    assert body["audioConfig"]["audioEncoding"] == "OGG_OPUS"


def test_speech_client_maps_http_errors(monkeypatch, speech_settings) -> None:
    error = HttpError(
        httplib2.Response({"status": 403}),
        b'{"error": {"message": "API key not valid"}}',
    )
    _patch_build(monkeypatch, error)

    with pytest.raises(UpstreamError) as excinfo:
        SpeechClient(speech_settings).synthesize("text")

    assert excinfo.value.status_code == 403


def test_speech_client_requires_audio(monkeypatch, speech_settings) -> None:
    _patch_build(monkeypatch, {})

    with pytest.raises(PayloadError):
        SpeechClient(speech_settings).synthesize("text")
