"""Shared fixtures: saved portal pages and a synthetic report-card grid."""

from __future__ import annotations

from pathlib import Path

import pytest

FIXTURES = Path(__file__).resolve().parent / "fixtures"


def read_fixture(name: str) -> str:
    return (FIXTURES / name).read_text(encoding="utf-8")


def report_card_html(rows: int, remainder: int = 0) -> str:
    """Build a report-card page: 32 legend cells, *rows* full rows, then *remainder* cells.

    Cell text is ``L<i>`` for the legend and ``r<row>c<col>`` for grid cells.
    """
    cells = [f"L{i}" for i in range(32)]
    for row in range(rows):
        cells.extend(f"r{row}c{col}" for col in range(32))
    cells.extend(f"x{i}" for i in range(remainder))
    # 32 cells per <tr>, like the real grid
    trs = []
    for start in range(0, len(cells), 32):
        tds = "".join(f"<td>{c}</td>" for c in cells[start:start + 32])
        trs.append(f"<tr>{tds}</tr>")
    return f"<html><body><table id='plnMain_dgReportCard'>{''.join(trs)}</table></body></html>"


@pytest.fixture()
def assignments_html() -> str:
    return read_fixture("assignments.html")


@pytest.fixture()
def registration_html() -> str:
    return read_fixture("registration.html")


@pytest.fixture()
def progress_html() -> str:
    return read_fixture("interim_progress.html")


@pytest.fixture()
def transcript_html() -> str:
    return read_fixture("transcript.html")


@pytest.fixture()
def login_html() -> str:
    return read_fixture("login.html")
