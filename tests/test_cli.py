"""Tests for the command line entry point."""

import sys
from pathlib import Path

import pytest

from fred_api.data import ResponseCache
from fred_api.data.fred_fetcher import main

from tests.conftest import OBSERVATIONS_XML

FRAGMENT = "series/observations?series_id=GNPCA&"


def run_main(monkeypatch, *args: str) -> None:
    monkeypatch.setattr(sys, "argv", ["fred-api", *args])
    main()


class TestMain:
    """Tests for main()."""

    def test_status(self, monkeypatch, capsys, tmp_path: Path) -> None:
        ResponseCache(tmp_path).insert_if_absent(FRAGMENT.encode(), OBSERVATIONS_XML)

        run_main(monkeypatch, "--cache", str(tmp_path), "--status")

        out = capsys.readouterr().out
        assert "Entries:   1" in out
        assert FRAGMENT in out

    def test_cache_only_fields(self, monkeypatch, capsys, tmp_path: Path) -> None:
        ResponseCache(tmp_path).insert_if_absent(FRAGMENT.encode(), OBSERVATIONS_XML)

        run_main(
            monkeypatch,
            FRAGMENT,
            "--cache", str(tmp_path),
            "--api-key", "abcd",
            "--lookup", "cache_only",
            "--field", "date",
            "--field", "value",
        )

        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == "1971-04-01\t0.850603488248666"
        assert len(lines) == 4

    def test_cache_only_miss_exits(self, monkeypatch, capsys, tmp_path: Path) -> None:
        with pytest.raises(SystemExit) as exc_info:
            run_main(
                monkeypatch, FRAGMENT, "--cache", str(tmp_path), "--api-key", "abcd",
                "--lookup", "cache_only",
            )
        assert exc_info.value.code == 1
        assert "Cache only request" in capsys.readouterr().out

    def test_missing_cache_location_exits(self, monkeypatch, capsys) -> None:
        monkeypatch.delenv("FRED_CACHE", raising=False)
        with pytest.raises(SystemExit) as exc_info:
            run_main(monkeypatch, "--status")
        assert exc_info.value.code == 1
        assert "Configuration error" in capsys.readouterr().out
