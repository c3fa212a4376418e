"""StalcraftDB auction history source."""

from __future__ import annotations

from time import sleep
from typing import Any

import requests

from auctionstats.domain.models import RawTrade
from auctionstats.errors import MalformedPayload, TransportError

BROWSER_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:143.0) Gecko/20100101 Firefox/143.0",
    "Accept": "application/json, */*",
    "Accept-Language": "en-US,en;q=0.5",
    "Connection": "keep-alive",
    "Sec-Fetch-Dest": "empty",
    "Sec-Fetch-Mode": "cors",
    "Sec-Fetch-Site": "same-origin",
}


class StalcraftHistorySource:
    """Fetch paged auction history from the StalcraftDB JSON API."""

    def __init__(
        self,
        base_url: str,
        region: str,
        timeout: int = 20,
        max_retries: int = 3,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.region = region.strip().lower()
        self.timeout = timeout
        self.max_retries = max_retries
        self.session = requests.Session()
        self.session.headers.update(BROWSER_HEADERS)

    def fetch_page(self, item_id: str, page: int) -> list[RawTrade]:
        url = f"{self.base_url}/api/items/{item_id}/auction-history"
        payload = self._request_with_retry(
            url,
            params={"region": self.region, "page": str(page)},
            headers={"Referer": f"{self.base_url}/{self.region}/{item_id}"},
        )
        return self.parse_payload(payload, url)

    def _request_with_retry(
        self,
        url: str,
        params: dict[str, str],
        headers: dict[str, str],
    ) -> Any:
        for attempt in range(1, self.max_retries + 1):
            try:
                response = self.session.get(
                    url,
                    params=params,
                    headers=headers,
                    timeout=self.timeout,
                )
            except requests.RequestException as exc:
                if attempt == self.max_retries:
                    raise TransportError(f"Network error for {url}: {exc}") from exc
                sleep(float(attempt))
                continue
            if response.status_code == 429:
                if attempt == self.max_retries:
                    raise TransportError(f"Rate limit exceeded for {url}")
                sleep(float(attempt))
                continue
            if response.status_code >= 500:
                if attempt == self.max_retries:
                    raise TransportError(f"HTTP {response.status_code} for {url}")
                sleep(float(attempt))
                continue
            if response.status_code >= 400:
                raise TransportError(f"HTTP {response.status_code} for {url}")
            try:
                return response.json()
            except ValueError as exc:
                raise MalformedPayload(f"Invalid JSON from {url}: {exc}") from exc
        raise TransportError(f"Request exhausted retries for {url}")

    @staticmethod
    def parse_payload(payload: Any, url: str = "") -> list[RawTrade]:
        """Accept `{"prices": [...]}` or a bare list of trade objects."""
        if isinstance(payload, dict):
            entries = payload.get("prices")
        else:
            entries = payload
        if not isinstance(entries, list):
            raise MalformedPayload(f"Expected a list of trades from {url or 'source'}")
        trades: list[RawTrade] = []
        for entry in entries:
            if not isinstance(entry, dict):
                raise MalformedPayload(
                    f"Expected trade objects from {url or 'source'}, got {type(entry).__name__}"
                )
            trades.append(RawTrade.from_mapping(entry))
        return trades
