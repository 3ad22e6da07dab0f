"""Combine per-class extraction results into one gradebook view."""

from __future__ import annotations

from typing import Mapping, Sequence

from hacapi.scraper.models import ClassRecord, Row


def merge_gradebook(
    averages: Mapping[str, str],
    assignments: Mapping[str, Sequence[Row]],
    weightings: Mapping[str, Sequence[Row]],
) -> dict[str, ClassRecord]:
    """Join the three per-class maps on class name.

    The result holds the *union* of the input keys.  A class missing from one
    source gets an empty average or an empty row list for that source; a
    missing source is never an error here.
    """
    names = set(averages) | set(assignments) | set(weightings)
    gradebook: dict[str, ClassRecord] = {}
    for name in names:
        gradebook[name] = {
            "average": averages.get(name, ""),
            "assignments": [list(row) for row in assignments.get(name, [])],
            "weightings": [list(row) for row in weightings.get(name, [])],
        }
    return gradebook
