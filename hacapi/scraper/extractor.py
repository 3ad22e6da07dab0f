"""Extraction engine: Home Access Center HTML → structured records.

One pure function per page type.  Each takes the raw HTML text (plus the
``short`` class-name flag where class names are involved) and returns plain
JSON-representable data.

Missing elements never raise.  They degrade to ``None`` (only for
:func:`extract_name` and :func:`extract_info`), an empty string, or an empty
collection.  Text that is not markup at all, including ``None`` or ``""``,
yields the same empty results.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from bs4 import BeautifulSoup, Tag

from hacapi.scraper.aggregate import merge_gradebook
from hacapi.scraper.models import (
    ClassRecord,
    GPAInfo,
    Row,
    StudentInfo,
    TranscriptSemester,
)
from hacapi.scraper.normalize import normalize_class_name
from hacapi.scraper.selectors import CONFIG

logger = logging.getLogger(__name__)

_SEL = CONFIG.selectors


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _parse(html: str | bytes | None) -> BeautifulSoup:
    return BeautifulSoup(html or "", "html.parser")


def _collapse(text: str) -> str:
    """Collapse runs of whitespace to single spaces and trim."""
    return " ".join(text.split())


def _strip_label(text: str, width: int) -> str:
    """Remove an invisible label of *width* characters duplicated before the value.

    Text no longer than *width* carries no label and is returned trimmed.
    """
    text = text.strip()
    if len(text) > width:
        return text[width:].strip()
    return text


def _cells(row: Tag) -> Row:
    return [_collapse(cell.get_text(" ")) for cell in row.select(_SEL.table_cell)]


def _non_empty(rows: Iterable[Row]) -> list[Row]:
    return [row for row in rows if row]


def _first_text(scope: Tag, selector: str) -> str:
    el = scope.select_one(selector)
    return _collapse(el.get_text(" ")) if el is not None else ""


def _header_class_name(container: Tag, short: bool) -> str:
    header = container.select_one(_SEL.class_header)
    if header is None:
        return ""
    return normalize_class_name(_collapse(header.get_text(" ")), short)


def _link_class_name(container: Tag, short: bool) -> str:
    link = container.select_one(_SEL.class_link)
    if link is None:
        return ""
    name = _strip_label(link.get_text(), CONFIG.class_link_label_width)
    return normalize_class_name(_collapse(name), short)


def _gpa_summary(soup: BeautifulSoup) -> GPAInfo:
    """Read the cumulative GPA table: descriptor/value pairs, rank, quartile."""
    summary: GPAInfo = {}
    table = soup.select_one(_SEL.gpa_table)
    if table is None:
        return summary

    for row in table.select(_SEL.table_row):
        label = row.select_one(_SEL.gpa_label)
        value = row.select_one(_SEL.gpa_value)
        if label is None or value is None:
            continue
        key = _collapse(label.get_text(" "))
        if key:
            summary[key] = _collapse(value.get_text(" "))

    rank = table.select_one(_SEL.gpa_rank)
    if rank is not None:
        summary["rank"] = _collapse(rank.get_text(" "))
    quartile = table.select_one(_SEL.gpa_quartile)
    if quartile is not None:
        summary["quartile"] = _collapse(quartile.get_text(" "))
    return summary


# ---------------------------------------------------------------------------
# Student
# ---------------------------------------------------------------------------

def extract_name(html: str) -> Optional[str]:
    """Return the student name shown in the page banner, or ``None``."""
    soup = _parse(html)
    el = soup.select_one(_SEL.banner_name)
    if el is None:
        return None
    return el.get_text().strip()


def extract_info(html: str) -> Optional[StudentInfo]:
    """Read the registration fields present on the page.

    Returns ``None`` only when none of the fields exist; otherwise the
    (possibly partial) mapping of the fields that were found.
    """
    soup = _parse(html)
    info: StudentInfo = {}
    for key, selector in _SEL.info_fields:
        el = soup.select_one(selector)
        if el is not None:
            info[key] = el.get_text().strip()
    return info or None


# ---------------------------------------------------------------------------
# Assignments page
# ---------------------------------------------------------------------------

def extract_classes(html: str, short: bool = False) -> list[str]:
    """List class names from the class headers.

    The first header on the page is the page-level summary and is skipped.
    Headers that normalise to an empty name are omitted.
    """
    soup = _parse(html)
    headers = soup.select(_SEL.class_header)[1:]
    classes = []
    for header in headers:
        name = normalize_class_name(_collapse(header.get_text(" ")), short)
        if name:
            classes.append(name)
    logger.debug("extract_classes: %d headers, %d classes", len(headers), len(classes))
    return classes


def extract_averages(html: str, short: bool = False) -> dict[str, str]:
    """Map each class to the average shown in its header."""
    soup = _parse(html)
    averages: dict[str, str] = {}
    for container in soup.select(_SEL.class_container):
        name = _header_class_name(container, short)
        if not name:
            continue
        el = container.select_one(_SEL.class_average)
        if el is None:
            averages[name] = ""
        else:
            averages[name] = _strip_label(el.get_text(), CONFIG.average_label_width)
    return averages


def extract_assignments(html: str, short: bool = False) -> dict[str, list[Row]]:
    """Map each class to its assignment rows.

    The header row, the two trailing summary rows and the per-category
    subtotal rows (``Major``, ``Minor``, ...) are dropped.
    """
    soup = _parse(html)
    assignments: dict[str, list[Row]] = {}
    for container in soup.select(_SEL.class_container):
        name = _link_class_name(container, short)
        if not name:
            continue
        rows: list[Row] = []
        table = container.select_one(_SEL.assignments_table)
        if table is not None:
            body = table.select(_SEL.table_row)[1:-CONFIG.assignments_footer_rows]
            for tr in body:
                row = [
                    _collapse(cell.get_text(" ").replace("*", ""))
                    for cell in tr.select(_SEL.table_cell)
                ]
                if not row or row[0] in CONFIG.assignment_category_rows:
                    continue
                rows.append(row)
        assignments[name] = rows
    return assignments


def extract_weightings(html: str, short: bool = False) -> dict[str, list[Row]]:
    """Map each class to the rows of its category-weighting table."""
    soup = _parse(html)
    weightings: dict[str, list[Row]] = {}
    for container in soup.select(_SEL.class_container):
        name = _header_class_name(container, short)
        if not name:
            continue
        rows: list[Row] = []
        table = container.select_one(_SEL.categories_table)
        if table is not None:
            rows = _non_empty(_cells(tr) for tr in table.select(_SEL.table_row)[1:-1])
        weightings[name] = rows
    return weightings


def extract_gradebook(html: str, short: bool = False) -> dict[str, ClassRecord]:
    """Per-class average, assignments and weightings in one view."""
    return merge_gradebook(
        extract_averages(html, short),
        extract_assignments(html, short),
        extract_weightings(html, short),
    )


# ---------------------------------------------------------------------------
# Report card / interim progress
# ---------------------------------------------------------------------------

def extract_report_cards(html: str) -> list[Row]:
    """Rebuild the report-card grid from the page's flattened table cells.

    See :class:`hacapi.scraper.selectors.ReportCardLayout` for the offsets.
    An incomplete trailing row is dropped.
    """
    layout = CONFIG.report_card
    soup = _parse(html)
    cells = [_collapse(td.get_text(" ")) for td in soup.select(_SEL.report_card_cell)]
    cells = cells[layout.preamble:]

    rows: list[Row] = []
    for start in range(0, len(cells) - layout.row_width + 1, layout.row_width):
        row = cells[start:start + layout.row_width]
        del row[layout.trailing_start:layout.trailing_start + layout.trailing_count]
        del row[layout.redundant_start:layout.redundant_start + layout.redundant_count]
        rows.append(row)
    logger.debug("extract_report_cards: %d cells, %d rows", len(cells), len(rows))
    return rows


def extract_progress(html: str) -> list[Row]:
    """Interim progress rows, without the header row."""
    soup = _parse(html)
    rows = _non_empty(_cells(tr) for tr in soup.select(_SEL.table_row))
    return rows[1:]


# ---------------------------------------------------------------------------
# Transcript
# ---------------------------------------------------------------------------

def extract_transcript(html: str) -> dict[str, Any]:
    """Semester groups keyed ``"<year> - Semester <n>"``, plus the GPA summary.

    GPA descriptor labels, ``rank`` and ``quartile`` are merged into the same
    top-level mapping as the semesters.
    """
    soup = _parse(html)
    transcript: dict[str, Any] = {}
    for group in soup.select(_SEL.transcript_group):
        fields = {key: _first_text(group, selector) for key, selector in _SEL.transcript_fields}
        semester: TranscriptSemester = {
            "year": fields["year"],
            "semester": fields["semester"],
            "grade": fields["grade"],
            "school": fields["school"],
            "credits": fields["credits"],
            # first header row holds the column titles
            "data": _non_empty(_cells(tr) for tr in group.select(_SEL.transcript_row)[1:]),
        }
        title = f"{semester['year']} - Semester {semester['semester']}"
        transcript[title] = semester

    transcript.update(_gpa_summary(soup))
    return transcript


def extract_rank(html: str) -> GPAInfo:
    """Only the cumulative GPA summary: descriptor values, rank and quartile."""
    return _gpa_summary(_parse(html))
