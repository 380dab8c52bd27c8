"""Tests for the end-to-end purge pipeline.

All tests inject a fake fetcher (a dict of URL → body) and a
``MemoryStore``, so no network or disk access happens.
"""

from __future__ import annotations

import httpx
import pytest

from sectioncss.purge.errors import NoMainContainerError, NoStylesheetsError, PageFetchError
from sectioncss.purge.models import Stage
from sectioncss.purge.pipeline import PurgePipeline, purge_url
from sectioncss.purge.storage import MemoryStore
from sectioncss.scraper.errors import FetchError

_URL = "https://example.com/landing/"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _fake_fetch(responses: dict[str, str]):
    async def fetch(url: str) -> str:
        if url not in responses:
            raise FetchError(url, httpx.ConnectError("unreachable"))
        return responses[url]

    return fetch


def _page(main: str | None, links: list[str]) -> str:
    head = "".join(f'<link rel="stylesheet" href="{href}">' for href in links)
    body = f"<main>{main}</main>" if main is not None else "<div>no main here</div>"
    return f"<html><head>{head}</head><body>{body}</body></html>"


# ---------------------------------------------------------------------------
# Terminal failures
# ---------------------------------------------------------------------------

class TestTerminalFailures:
    async def test_page_fetch_failure(self) -> None:
        pipeline = PurgePipeline(MemoryStore(), _fake_fetch({}))
        with pytest.raises(PageFetchError) as excinfo:
            await pipeline.run(_URL)

        assert excinfo.value.message == "Error fetching HTML."
        assert pipeline.stage is Stage.FAILED_FETCH_PAGE

    async def test_missing_main_even_with_stylesheets(self) -> None:
        fetch = _fake_fetch(
            {_URL: _page(None, ["/site.css"]), "https://example.com/site.css": "#a{color:red}"}
        )
        pipeline = PurgePipeline(MemoryStore(), fetch)
        with pytest.raises(NoMainContainerError) as excinfo:
            await pipeline.run(_URL)

        assert excinfo.value.message == "<main> element not found."
        assert pipeline.stage is Stage.FAILED_NO_MAIN

    async def test_no_stylesheet_links_even_with_sections(self) -> None:
        fetch = _fake_fetch({_URL: _page('<section id="a"></section>', [])})
        pipeline = PurgePipeline(MemoryStore(), fetch)
        with pytest.raises(NoStylesheetsError) as excinfo:
            await pipeline.run(_URL)

        assert excinfo.value.message == "No CSS files found."
        assert pipeline.stage is Stage.FAILED_NO_STYLESHEETS

    async def test_nothing_written_on_terminal_failure(self) -> None:
        store = MemoryStore()
        fetch = _fake_fetch({_URL: _page(None, ["/site.css"])})
        with pytest.raises(NoMainContainerError):
            await PurgePipeline(store, fetch).run(_URL)
        assert store.files == {}


# ---------------------------------------------------------------------------
# Successful runs
# ---------------------------------------------------------------------------

class TestPurgeRun:
    async def test_one_file_per_section(self) -> None:
        store = MemoryStore()
        fetch = _fake_fetch(
            {
                _URL: _page('<section id="a">A</section><section id="b">B</section>', ["/site.css"]),
                "https://example.com/site.css": "#a{color:red}#b{color:blue}",
            }
        )
        pipeline = PurgePipeline(store, fetch)

        report = await pipeline.run(_URL)

        assert [a.to_dict() for a in report.artifacts] == [
            {"id": "a", "name": "section-a.css", "url": "/section-a.css"},
            {"id": "b", "name": "section-b.css", "url": "/section-b.css"},
        ]
        assert "#a" in store.files["section-a.css"]
        assert "#b" not in store.files["section-a.css"]
        assert "#b" in store.files["section-b.css"]
        assert "#a" not in store.files["section-b.css"]
        assert report.issues == []
        assert pipeline.stage is Stage.DONE

    async def test_two_stylesheets_concatenate_in_discovery_order(self) -> None:
        store = MemoryStore()
        fetch = _fake_fetch(
            {
                _URL: _page(
                    '<section id="s"><h1 class="title">T</h1><p class="lead">L</p></section>',
                    ["second.css", "/first.css"],
                ),
                "https://example.com/landing/second.css": ".lead{color:blue}",
                "https://example.com/first.css": ".title{color:red}",
            }
        )

        await PurgePipeline(store, fetch).run(_URL)

        css = store.files["section-s.css"]
        assert css.index(".lead") < css.index(".title")

    async def test_zero_qualifying_children_is_success(self) -> None:
        fetch = _fake_fetch(
            {
                _URL: _page("<div>no id</div><p>none</p>", ["/site.css"]),
                "https://example.com/site.css": "div{margin:0}",
            }
        )
        report = await PurgePipeline(MemoryStore(), fetch).run(_URL)
        assert report.artifacts == []

    async def test_unstyled_section_produces_no_artifact(self) -> None:
        store = MemoryStore()
        fetch = _fake_fetch(
            {
                _URL: _page('<section id="a">A</section><section id="plain">P</section>', ["/s.css"]),
                "https://example.com/s.css": "#a{color:red}",
            }
        )

        report = await PurgePipeline(store, fetch).run(_URL)

        assert [a.section_id for a in report.artifacts] == ["a"]
        assert "section-plain.css" not in store.files

    async def test_failed_stylesheet_does_not_remove_other_contributions(self) -> None:
        store = MemoryStore()
        fetch = _fake_fetch(
            {
                _URL: _page(
                    '<section id="a">A</section><section id="b">B</section>',
                    ["/down.css", "/up.css"],
                ),
                "https://example.com/up.css": "#a{color:red}#b{color:blue}",
            }
        )

        report = await PurgePipeline(store, fetch).run(_URL)

        assert [a.section_id for a in report.artifacts] == ["a", "b"]
        assert [i.resource for i in report.issues] == ["https://example.com/down.css"]
        assert report.issues[0].stage is Stage.RESOLVING_STYLESHEETS

    async def test_every_stylesheet_failing_is_empty_success(self) -> None:
        fetch = _fake_fetch({_URL: _page('<section id="a">A</section>', ["/gone.css"])})
        report = await PurgePipeline(MemoryStore(), fetch).run(_URL)
        assert report.artifacts == []
        assert len(report.issues) == 1

    async def test_duplicate_stylesheet_contributes_twice(self) -> None:
        store = MemoryStore()
        fetch = _fake_fetch(
            {
                _URL: _page('<section id="a">A</section>', ["/s.css", "/s.css"]),
                "https://example.com/s.css": "#a{color:red}",
            }
        )

        await PurgePipeline(store, fetch).run(_URL)

        assert store.files["section-a.css"].count("#a") == 2

    async def test_identical_input_gives_identical_output(self) -> None:
        pages = {
            _URL: _page(
                '<section id="a"><a class="btn" href="#">x</a></section>', ["/s.css"]
            ),
            "https://example.com/s.css": ".btn{padding:1px}.btn:hover{color:red}.x{top:0}",
        }
        first, second = MemoryStore(), MemoryStore()

        await purge_url(_URL, first, _fake_fetch(pages))
        await purge_url(_URL, second, _fake_fetch(pages))

        assert first.files == second.files

    async def test_unsafe_section_id_is_sanitised(self) -> None:
        store = MemoryStore()
        fetch = _fake_fetch(
            {
                _URL: _page('<section id="../evil">E</section>', ["/s.css"]),
                "https://example.com/s.css": "section{color:red}",
            }
        )

        report = await PurgePipeline(store, fetch).run(_URL)

        assert report.artifacts[0].section_id == "../evil"
        assert report.artifacts[0].file_name.startswith("section-.._evil~")
        assert "/" not in report.artifacts[0].file_name

    async def test_non_ascii_section_ids_get_separate_files(self) -> None:
        store = MemoryStore()
        fetch = _fake_fetch(
            {
                _URL: _page(
                    '<section id="日本"><p class="x">J</p></section>'
                    '<section id="中国"><p class="y">C</p></section>',
                    ["/s.css"],
                ),
                "https://example.com/s.css": ".x { color: red } .y { color: blue }",
            }
        )

        report = await PurgePipeline(store, fetch).run(_URL)

        japan, china = report.artifacts
        assert (japan.section_id, china.section_id) == ("日本", "中国")
        assert japan.file_name != china.file_name
        assert len(store.files) == 2
        assert ".x" in store.files[japan.file_name]
        assert ".y" not in store.files[japan.file_name]
        assert ".y" in store.files[china.file_name]
        assert ".x" not in store.files[china.file_name]
