"""Fixed selector and offset tables for Home Access Center pages.

Every CSS selector and positional constant the extraction engine relies on
is collected here, once, in frozen dataclasses.  The tables are read-only
process-wide state; nothing in the package mutates them and they are not
exposed through :mod:`hacapi.config`.

The report-card grid offsets describe one specific upstream page layout.
There is no runtime check that the layout still matches; change them only
together with a fixture captured from the new layout.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ReportCardLayout:
    """Positional schema of the ReportCards.aspx grid (0-based indices)."""

    # Legend cells at the start of the flattened cell list.
    preamble: int = 32
    row_width: int = 32
    # Decorative columns at the end of every row, removed first.
    trailing_start: int = 23
    trailing_count: int = 9
    # Redundant columns, removed after the trailing block.
    redundant_start: int = 5
    redundant_count: int = 2

    @property
    def columns(self) -> int:
        """Number of cells left in each row after slicing."""
        return self.row_width - self.trailing_count - self.redundant_count


@dataclass(frozen=True)
class ClassNameRules:
    """Lexical rules for cleaning class-name headers."""

    # Everything at or after this literal is decorative.
    classwork_marker: str = "Classwork"
    # Teacher / room / period words preceding the course title.
    boilerplate_words: int = 3
    noise_words: frozenset[str] = frozenset({"Classwork", "Average"})


@dataclass(frozen=True)
class PageSelectors:
    # Classes/Classwork
    banner_name: str = "div.sg-banner-menu-container span"

    # Registration.aspx, (field name, selector) in response order
    info_fields: tuple[tuple[str, str], ...] = (
        ("name", "#plnMain_lblRegStudentName"),
        ("grade", "#plnMain_lblGrade"),
        ("school", "#plnMain_lblBuildingName"),
        ("dob", "#plnMain_lblBirthDate"),
        ("counselor", "#plnMain_lblCounselor"),
        ("language", "#plnMain_lblLanguage"),
        ("cohort_year", "#plnMain_lblCohortYear"),
    )

    # Assignments.aspx
    class_header: str = "div.sg-header"
    class_container: str = "div.AssignmentClass"
    class_link: str = "a.sg-header-heading"
    class_average: str = "span.sg-header-heading.sg-right"
    assignments_table: str = "table[id*='CourseAssignments']"
    categories_table: str = "table[id*='CourseCategories']"

    # Generic table structure
    table_row: str = "tr"
    table_cell: str = "td, th"

    # ReportCards.aspx
    report_card_cell: str = "td"

    # Transcript.aspx
    transcript_group: str = "td.sg-transcript-group"
    transcript_fields: tuple[tuple[str, str], ...] = (
        ("year", "[id*='YearValue']"),
        ("semester", "[id*='GroupValue']"),
        ("grade", "[id*='GradeValue']"),
        ("school", "[id*='BuildingValue']"),
        ("credits", "[id*='CreditValue']"),
    )
    transcript_row: str = "tr.sg-asp-table-header-row, tr.sg-asp-table-data-row"
    gpa_table: str = "table[id*='CumGPA']"
    gpa_label: str = "[id*='GPADescr']"
    gpa_value: str = "[id*='GPACum']"
    gpa_rank: str = "[id*='GPARank']"
    gpa_quartile: str = "[id*='GPAQuartile']"


@dataclass(frozen=True)
class ExtractionConfig:
    selectors: PageSelectors = PageSelectors()
    names: ClassNameRules = ClassNameRules()
    report_card: ReportCardLayout = ReportCardLayout()

    # Width of the invisible label duplicated before the visible text.
    average_label_width: int = 18
    class_link_label_width: int = 12

    # Summary rows closing the assignments table.
    assignments_footer_rows: int = 2
    assignment_category_rows: frozenset[str] = frozenset(
        {"Major", "Minor", "Other", "Total"}
    )


CONFIG = ExtractionConfig()
