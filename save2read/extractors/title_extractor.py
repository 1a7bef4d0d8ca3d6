import logging
from typing import Optional

import requests
from bs4 import BeautifulSoup

from .base_extractor import TitleExtractionError, TitleExtractor

logger = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/123.0.0.0 Safari/537.36"
)


def title_from_html(html: str) -> Optional[str]:
    soup = BeautifulSoup(html, "html.parser")
    head = soup.head
    title = head.title if head else soup.title
    if not title:
        return None
    text = title.get_text().strip()
    return text or None


class RequestsTitleExtractor(TitleExtractor):
    def __init__(self, timeout_seconds: int = 10, session: requests.Session | None = None):
        self.timeout = timeout_seconds
        self.session = session or requests.Session()

    def extract_title(self, url: str) -> Optional[str]:
        try:
            resp = self.session.get(
                url,
                timeout=self.timeout,
                headers={"User-Agent": USER_AGENT},
            )
        except requests.RequestException as e:
            raise TitleExtractionError(
                f"Can't fetch {url} for title extraction: {e}"
            ) from e

        if not resp.ok:
            logger.warning("Fetching %s returned %s; reading title anyway", url, resp.status_code)

        title = title_from_html(resp.text)
        if title:
            logger.info("Extracted title %r from %s", title, url)
        else:
            logger.info("No <title> found at %s", url)
        return title
