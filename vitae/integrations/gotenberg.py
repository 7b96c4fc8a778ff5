from __future__ import annotations

import logging
from typing import Optional

import httpx

from vitae.ports import PDFEngineError, PDFOptions

logger = logging.getLogger(__name__)


def _fmt(value: float) -> str:
    return f"{value:.2f}"


class GotenbergClient:
    """HTML to PDF through Gotenberg's Chromium route."""

    def __init__(self, base_url: str, timeout_s: float = 60.0, client: Optional[httpx.AsyncClient] = None):
        self._base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=timeout_s)

    async def render_pdf(self, html: str, template_name: str, options: PDFOptions) -> bytes:
        data = {
            "paperWidth": _fmt(options.paper_width),
            "paperHeight": _fmt(options.paper_height),
            "marginTop": _fmt(options.margin_top),
            "marginBottom": _fmt(options.margin_bottom),
            "marginLeft": _fmt(options.margin_left),
            "marginRight": _fmt(options.margin_right),
            "scale": _fmt(options.scale),
            "printBackground": "true" if options.print_background else "false",
            "preferCssPageSize": "false",
        }
        files = {"files": ("index.html", html.encode("utf-8"), "text/html")}
        url = f"{self._base_url}/forms/chromium/convert/html"

        try:
            response = await self._client.post(url, data=data, files=files)
        except httpx.HTTPError as exc:
            logger.warning("gotenberg_request_failed template=%s: %s", template_name, exc)
            raise PDFEngineError(f"PDF engine unreachable: {exc}") from exc

        if response.status_code != 200:
            logger.warning(
                "gotenberg_bad_status template=%s status=%s body=%s",
                template_name,
                response.status_code,
                response.text[:300],
            )
            raise PDFEngineError(f"PDF engine returned status {response.status_code}")
        if not response.content:
            raise PDFEngineError("PDF engine returned an empty document")
        return response.content

    async def aclose(self) -> None:
        await self._client.aclose()
