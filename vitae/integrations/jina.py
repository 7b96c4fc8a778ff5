from __future__ import annotations

import logging
import re
from typing import Any, Optional
from urllib.parse import urlparse

import httpx

from vitae.domain import ParsedJob
from vitae.ports import JobParserError

logger = logging.getLogger(__name__)

_BLANK_RUNS_RE = re.compile(r"\n\s*\n\s*\n+")


def _clean_description(text: str) -> str:
    return _BLANK_RUNS_RE.sub("\n\n", text or "").strip()


def _title_from_markdown(text: str) -> str:
    lines = [line.strip() for line in (text or "").splitlines() if line.strip()]
    for line in lines:
        if line.startswith("# "):
            return line[2:].strip()
    if lines:
        return lines[0][:100]
    return "Job Description"


class JinaJobParser:
    """Fetch a job posting as clean text through the Jina Reader API."""

    def __init__(
        self,
        base_url: str = "https://r.jina.ai",
        api_key: Optional[str] = None,
        timeout_s: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._client = client or httpx.AsyncClient(timeout=timeout_s, follow_redirects=True)

    async def parse_url(self, url: str) -> ParsedJob:
        url = (url or "").strip()
        scheme = urlparse(url).scheme.lower()
        if scheme not in {"http", "https"}:
            raise JobParserError("Job URL must use http or https", code="INVALID_URL")

        headers = {"Accept": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"

        try:
            response = await self._client.get(f"{self._base_url}/{url}", headers=headers)
        except httpx.HTTPError as exc:
            logger.warning("jina_request_failed url=%s: %s", url, exc)
            raise JobParserError(f"Failed to fetch job posting: {exc}") from exc
        if response.status_code != 200:
            logger.warning("jina_bad_status url=%s status=%s", url, response.status_code)
            raise JobParserError(f"Job posting fetch returned status {response.status_code}")

        data: dict[str, Any] = {}
        try:
            payload = response.json()
        except ValueError:
            payload = None
        if isinstance(payload, dict) and isinstance(payload.get("data"), dict):
            data = payload["data"]

        content = str(data.get("content") or "") if data else response.text
        if not content.strip():
            raise JobParserError("Job posting is empty", code="EMPTY_POSTING")

        title = str(data.get("title") or "").strip() or _title_from_markdown(content)
        return ParsedJob(
            title=title,
            company="",
            description=_clean_description(content),
            url=url,
            published_at=(str(data.get("publishedTime") or data.get("publishTime") or "").strip() or None),
        )

    async def aclose(self) -> None:
        await self._client.aclose()
