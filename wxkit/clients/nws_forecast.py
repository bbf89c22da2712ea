"""National Weather Service text product client."""

from __future__ import annotations

from html.parser import HTMLParser
from typing import List, Optional

import httpx

from wxkit.core.config import ForecastSettings
from wxkit.core.exceptions import PayloadError, UpstreamError
from wxkit.utils.http import RetryConfig, request_with_retry

SERVICE_NAME = "NWS forecast discussion"


class _PreTextExtractor(HTMLParser):
    """Collect the text of the first ``<pre>`` element with a given id."""

    def __init__(self, element_id: str) -> None:
        super().__init__(convert_charrefs=True)
        self._element_id = element_id
        self._depth = 0
        self._chunks: List[str] = []
        self.found = False

    def handle_starttag(self, tag, attrs):
        if tag != "pre":
            return
        if self._depth:
            self._depth += 1
        elif not self.found and dict(attrs).get("id") == self._element_id:
            self._depth = 1
            self.found = True

    def handle_endtag(self, tag):
        if tag == "pre" and self._depth:
            self._depth -= 1

    def handle_data(self, data):
        if self._depth:
            self._chunks.append(data)

    @property
    def text(self) -> str:
        return "".join(self._chunks)


def extract_product_text(html: str, element_id: str = "proddiff") -> Optional[str]:
    """Return the product text embedded in the page, or ``None``."""
    parser = _PreTextExtractor(element_id)
    parser.feed(html)
    parser.close()
    return parser.text if parser.found else None


class ForecastDiscussionClient:
    """Download the Area Forecast Discussion for a forecast office."""

    PRODUCT_PATH = "/product.php"

    def __init__(
        self,
        settings: ForecastSettings,
        http_client: httpx.Client,
        *,
        retry_config: RetryConfig | None = None,
    ) -> None:
        self._settings = settings
        self._http = http_client
        self._retry = retry_config or RetryConfig()

    def fetch_discussion(self, office: str | None = None) -> str:
        site = (office or self._settings.office).upper()
        params = {
            "site": site,
            "issuedby": site,
            "product": "AFD",
            "format": "TXT",
            "version": 1,
            "glossary": 0,
            "highlight": "off",
        }
        url = f"{str(self._settings.base_url).rstrip('/')}{self.PRODUCT_PATH}"

        try:
            response = request_with_retry(
                self._http.get, url, params=params, retry_config=self._retry
            )
        except httpx.TransportError as exc:
            raise UpstreamError(SERVICE_NAME, None, str(exc)) from exc

        if not response.is_success:
            raise UpstreamError(SERVICE_NAME, response.status_code, response.reason_phrase)

        text = extract_product_text(response.text)
        if text is None:
            raise PayloadError(f"No forecast discussion found for office {site}.")
        return text


__all__ = ["ForecastDiscussionClient", "extract_product_text"]
