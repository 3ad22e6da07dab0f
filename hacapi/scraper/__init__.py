"""Scraper package: portal login, page fetching and HTML extraction."""

from hacapi.scraper.extractor import (
    extract_assignments,
    extract_averages,
    extract_classes,
    extract_gradebook,
    extract_info,
    extract_name,
    extract_progress,
    extract_rank,
    extract_report_cards,
    extract_transcript,
    extract_weightings,
)
from hacapi.scraper.models import PageType, RawPage
from hacapi.scraper.normalize import normalize_class_name, shorten_class_name

__all__ = [
    "extract_assignments",
    "extract_averages",
    "extract_classes",
    "extract_gradebook",
    "extract_info",
    "extract_name",
    "extract_progress",
    "extract_rank",
    "extract_report_cards",
    "extract_transcript",
    "extract_weightings",
    "normalize_class_name",
    "shorten_class_name",
    "PageType",
    "RawPage",
]
