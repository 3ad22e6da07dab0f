"""Record shapes produced by the extraction engine.

Results are plain ``dict`` / ``list`` / ``str`` values so they serialise to
JSON unchanged; the ``TypedDict`` declarations document their keys.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, TypedDict

Row = List[str]
StudentInfo = Dict[str, str]
GPAInfo = Dict[str, Any]


class PageType(str, Enum):
    """Upstream pages the engine knows how to read, with their paths."""

    NAME = "name"
    INFO = "info"
    ASSIGNMENTS = "assignments"
    REPORT_CARD = "reportcard"
    PROGRESS = "ipr"
    TRANSCRIPT = "transcript"

    @property
    def path(self) -> str:
        return _PAGE_PATHS[self]


_PAGE_PATHS = {
    PageType.NAME: "/HomeAccess/Classes/Classwork",
    PageType.INFO: "/HomeAccess/Content/Student/Registration.aspx",
    PageType.ASSIGNMENTS: "/HomeAccess/Content/Student/Assignments.aspx",
    PageType.REPORT_CARD: "/HomeAccess/Content/Student/ReportCards.aspx",
    PageType.PROGRESS: "/HomeAccess/Content/Student/InterimProgress.aspx",
    PageType.TRANSCRIPT: "/HomeAccess/Content/Student/Transcript.aspx",
}


@dataclass(frozen=True)
class RawPage:
    """An HTML document tagged with the page it was fetched from."""

    page_type: PageType
    html: str


class ClassRecord(TypedDict):
    average: str
    assignments: List[Row]
    weightings: List[Row]


class TranscriptSemester(TypedDict):
    year: str
    semester: str
    grade: str
    school: str
    credits: str
    data: List[Row]
