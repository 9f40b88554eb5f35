"""
CLI parsing and command handler tests.
"""

from __future__ import annotations

import asyncio

import pytest

from src.adapters.memory_api import InMemoryContentApi
from src.app_shell.cli import build_parser, run_command
from src.app_shell.context import SiteContext


class TestParser:
    def test_list_defaults(self) -> None:
        args = build_parser().parse_args(["list", "news"])

        assert args.command == "list"
        assert args.kind == "news"
        assert args.category == "All"
        assert args.limit is None
        assert args.level is None
        assert args.search is None
        assert args.facility_type is None

    def test_admin_refresh_flag(self) -> None:
        args = build_parser().parse_args(["admin-list", "journals", "--refresh"])
        assert args.refresh is True

    def test_unknown_kind_rejected(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["list", "videos"])

    def test_command_required(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestCommands:
    def test_levels(self, site_context: SiteContext, capsys: pytest.CaptureFixture[str]) -> None:
        args = build_parser().parse_args(["levels"])

        asyncio.run(run_command(site_context, args))

        out = capsys.readouterr().out
        assert "* UMUM" in out
        assert "MI Al Hidayah [emerald]" in out

    def test_list_with_level(
        self, site_context: SiteContext, capsys: pytest.CaptureFixture[str]
    ) -> None:
        args = build_parser().parse_args(["list", "news", "--level", "MI"])

        asyncio.run(run_command(site_context, args))

        out = capsys.readouterr().out
        assert "Categories: All, Kegiatan, Prestasi" in out
        assert "[1] Kegiatan Santri 1 (MI, Kegiatan)" in out
        assert "[2]" not in out

    def test_list_facility_tab(
        self, site_context: SiteContext, capsys: pytest.CaptureFixture[str]
    ) -> None:
        args = build_parser().parse_args(["list", "facilities", "--type", "Ekstra"])

        asyncio.run(run_command(site_context, args))

        out = capsys.readouterr().out
        assert "[f5] Robotik" in out
        assert "[f1]" not in out

    def test_list_news_search_and_trending(
        self, site_context: SiteContext, capsys: pytest.CaptureFixture[str]
    ) -> None:
        args = build_parser().parse_args(["list", "news", "--search", "santri 4"])

        asyncio.run(run_command(site_context, args))

        out = capsys.readouterr().out
        assert " - [4] Kegiatan Santri 4" in out
        assert " - [5]" not in out
        assert " * trending: [1] Kegiatan Santri 1" in out

    def test_detail(self, site_context: SiteContext, capsys: pytest.CaptureFixture[str]) -> None:
        args = build_parser().parse_args(["detail", "projects", "p2"])

        asyncio.run(run_command(site_context, args))

        out = capsys.readouterr().out
        assert out.startswith("Kantin Digital")
        assert "related: [p1] Irigasi IoT" in out

    def test_detail_missing_exits(self, site_context: SiteContext) -> None:
        args = build_parser().parse_args(["detail", "news", "404"])

        with pytest.raises(SystemExit) as excinfo:
            asyncio.run(run_command(site_context, args))

        assert excinfo.value.code == 1

    def test_delete(
        self,
        site_context: SiteContext,
        content_api: InMemoryContentApi,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        args = build_parser().parse_args(["delete", "facilities", "f5"])

        asyncio.run(run_command(site_context, args))

        assert "facilities deleted" in capsys.readouterr().out
        assert content_api.call_count("delete_item") == 1

    def test_admin_list(
        self, site_context: SiteContext, capsys: pytest.CaptureFixture[str]
    ) -> None:
        args = build_parser().parse_args(["admin-list", "projects"])

        asyncio.run(run_command(site_context, args))

        assert "2 projects from content API" in capsys.readouterr().out
