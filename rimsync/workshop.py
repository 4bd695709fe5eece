"""Steam Workshop search for mods whose workshop id is unknown."""

import html
import logging
import re

import httpx

from rimsync.constants import RIMWORLD_APP_ID, UNKNOWN_STEAM_ID, WORKSHOP_SEARCH_URL
from rimsync.error_log import ErrorLog
from rimsync.exceptions import WorkshopSearchError

log = logging.getLogger(__name__)

_ITEM_START = re.compile(r'<div[^>]*class="workshopItem"[^>]*>')
_ITEM_TITLE = re.compile(r'<div[^>]*class="workshopItemTitle[^"]*"[^>]*>(.*?)</div>', re.DOTALL)
_ITEM_ID = re.compile(r"filedetails/\?id=(\d+)")


def _split_items(page: str) -> list[str]:
    """Split a browse page into one chunk of markup per workshop item."""
    starts = [m.start() for m in _ITEM_START.finditer(page)]
    return [page[start:end] for start, end in zip(starts, starts[1:] + [len(page)])]


def parse_search_results(page: str, name: str) -> str | None:
    """Find the workshop id of the first item titled exactly ``name``.

    Args:
        page: HTML of a workshop browse page
        name: Mod name to match against rendered titles

    Returns:
        The numeric workshop id, or None if no item matches or the matching
        item carries no details link
    """
    for chunk in _split_items(page):
        title = _ITEM_TITLE.search(chunk)
        if title is None or html.unescape(title.group(1)).strip() != name:
            continue
        item_id = _ITEM_ID.search(chunk)
        return item_id.group(1) if item_id else None
    return None


class WorkshopSearch:
    """Looks up workshop ids by mod name."""

    def __init__(
        self,
        app_id: str = RIMWORLD_APP_ID,
        error_log: ErrorLog | None = None,
        client: httpx.Client | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.app_id = app_id
        self.error_log = error_log
        self._client = client
        self._timeout = timeout

    def _record(self, name: str, error: str) -> None:
        if self.error_log is not None:
            self.error_log.log_error(UNKNOWN_STEAM_ID, name, error)

    def _fetch(self, name: str) -> str:
        params = {"appid": self.app_id, "searchtext": name}
        if self._client is not None:
            response = self._client.get(WORKSHOP_SEARCH_URL, params=params)
            response.raise_for_status()
            return response.text

        with httpx.Client(follow_redirects=True, timeout=self._timeout) as client:
            response = client.get(WORKSHOP_SEARCH_URL, params=params)
            response.raise_for_status()
            return response.text

    def find_mod_id(self, name: str) -> str | None:
        """Resolve a mod name to its workshop id.

        Returns:
            The workshop id, or None when no search result matches

        Raises:
            WorkshopSearchError: If the request fails or the body cannot be read
        """
        log.info("Searching the workshop for '%s'...", name)
        try:
            page = self._fetch(name)
        except httpx.HTTPError as e:
            error = f"Workshop search request failed: {e}"
            log.error(error)
            self._record(name, error)
            raise WorkshopSearchError(error)

        mod_id = parse_search_results(page, name)
        if mod_id is None:
            error = f"Mod '{name}' not found in workshop search results"
            log.warning(error)
            self._record(name, error)
            return None

        log.info("Found '%s' with id %s", name, mod_id)
        return mod_id
