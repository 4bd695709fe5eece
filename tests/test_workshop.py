"""Tests for rimsync.workshop module."""

import httpx
import pytest

from rimsync.exceptions import WorkshopSearchError
from rimsync.workshop import WorkshopSearch, parse_search_results


def _item(mod_id: str, title: str) -> str:
    return f"""
    <div class="workshopItem">
        <a href="https://steamcommunity.com/sharedfiles/filedetails/?id={mod_id}&searchtext=" class="ugc" data-publishedfileid="{mod_id}">
            <div class="workshopItemPreviewHolder"><img class="workshopItemPreviewImage" src="preview.jpg"></div>
        </a>
        <a href="https://steamcommunity.com/sharedfiles/filedetails/?id={mod_id}&searchtext=">
            <div class="workshopItemTitle ellipsis">{title}</div>
        </a>
        <div class="workshopItemAuthorName ellipsis">by&nbsp;<a href="https://steamcommunity.com/id/someone/myworkshopfiles/?appid=294100">someone</a></div>
    </div>
    """


def _page(*items: str) -> str:
    return f'<html><body><div class="workshopBrowseItems">{"".join(items)}</div></body></html>'


class TestParseSearchResults:
    def test_exact_title_match(self):
        page = _page(_item("111", "HugsLib Extras"), _item("818773962", "HugsLib"))

        assert parse_search_results(page, "HugsLib") == "818773962"

    def test_first_match_wins(self):
        page = _page(_item("1", "Same Name"), _item("2", "Same Name"))

        assert parse_search_results(page, "Same Name") == "1"

    def test_no_match(self):
        page = _page(_item("111", "Something Else"))

        assert parse_search_results(page, "HugsLib") is None

    def test_empty_page(self):
        assert parse_search_results("<html></html>", "HugsLib") is None

    def test_match_without_id(self):
        page = _page('<div class="workshopItem"><div class="workshopItemTitle ellipsis">HugsLib</div></div>')

        assert parse_search_results(page, "HugsLib") is None

    def test_html_entities_in_title(self):
        page = _page(_item("42", "Dubs Bad Hygiene &amp; More"))

        assert parse_search_results(page, "Dubs Bad Hygiene & More") == "42"

    def test_regex_metacharacters_in_name(self):
        """Names are compared literally, not as patterns."""
        page = _page(_item("7", "Mod (Continued) [1.5]+"), _item("8", "Mod Continued 1.5"))

        assert parse_search_results(page, "Mod (Continued) [1.5]+") == "7"
        assert parse_search_results(page, "Mod .* 1.5") is None


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


class TestWorkshopSearch:
    def test_request_parameters(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, text=_page(_item("818773962", "HugsLib")))

        search = WorkshopSearch(app_id="294100", client=_client(handler))

        assert search.find_mod_id("HugsLib") == "818773962"
        assert len(seen) == 1
        assert seen[0].url.host == "steamcommunity.com"
        assert seen[0].url.params["appid"] == "294100"
        assert seen[0].url.params["searchtext"] == "HugsLib"

    def test_name_is_url_escaped(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, text=_page())

        WorkshopSearch(client=_client(handler)).find_mod_id("A & B #1")

        assert b"%26" in seen[0].url.query
        assert b"%23" in seen[0].url.query
        assert seen[0].url.params["searchtext"] == "A & B #1"

    def test_not_found_is_logged(self, error_log):
        search = WorkshopSearch(
            error_log=error_log,
            client=_client(lambda request: httpx.Response(200, text=_page(_item("1", "Other")))),
        )

        assert search.find_mod_id("HugsLib") is None
        text = error_log.path.read_text()
        assert "ID: 0" in text
        assert "Name: HugsLib" in text
        assert text.count("-" * 80) == 1

    def test_transport_error_raises(self, error_log):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        search = WorkshopSearch(error_log=error_log, client=_client(handler))

        with pytest.raises(WorkshopSearchError, match="connection refused"):
            search.find_mod_id("HugsLib")
        assert "Name: HugsLib" in error_log.path.read_text()

    def test_http_error_status_raises(self):
        search = WorkshopSearch(client=_client(lambda request: httpx.Response(503)))

        with pytest.raises(WorkshopSearchError):
            search.find_mod_id("HugsLib")

    def test_no_retry(self):
        calls = []

        def handler(request):
            calls.append(request)
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(WorkshopSearchError):
            WorkshopSearch(client=_client(handler)).find_mod_id("HugsLib")
        assert len(calls) == 1
