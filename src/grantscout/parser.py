"""Parser for markdown grant listings returned by the completion service."""

import enum
import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Optional

from .models import NOT_SPECIFIED, ClarificationResult, GrantRecord, SearchResult
from .prompts import FIELD_LABELS

logger = logging.getLogger(__name__)

MIN_SECTION_LENGTH = 50
UNKNOWN_TITLE = "Unknown Grant"

FIELD_MARKER_RE = re.compile(
    r"- \*\*(?:" + "|".join(re.escape(label) for label in FIELD_LABELS) + r"):\*\*",
    re.IGNORECASE,
)

INTRO_RE = re.compile(r"^(?:Certainly|Here are|I found|Based on)", re.IGNORECASE)

# Zero-width, so each numbered heading stays with the section that follows it.
SECTION_BOUNDARY_RE = re.compile(
    r"(?=^[ \t]*(?:#{1,6}[ \t]*)?(?:\*\*[ \t]*\d+\.|\d+\.\s))",
    re.MULTILINE,
)

TITLE_PATTERNS = (
    re.compile(r"^[ \t]*#{1,6}[ \t]*\d+\.[ \t]*(.+)", re.MULTILINE),
    re.compile(r"^\s*\d+\.\s*(.+)"),
    re.compile(r"\*\*\s*\d+\.\s*(.+?)\s*\*\*"),
    re.compile(r"\*\*\s*(.+?)\s*\*\*"),
    re.compile(r"^(.+)"),
)

DETAILS_RE = re.compile(
    r"- \*\*Details:\*\*\s*(.+?)(?=\s*-?\s*\U0001F517|\n[ \t]*\n|\Z)",
    re.IGNORECASE | re.DOTALL,
)
MORE_INFO_RE = re.compile(r"\U0001F517\s*\[More Info\]\s*\(([^)]+)\)", re.IGNORECASE)
LINK_RE = re.compile(r"\U0001F517\s*\[([^\]]+)\]\s*\(([^)]+)\)")

_field_patterns: dict[str, re.Pattern] = {}


class ResponseKind(enum.Enum):
    CLARIFICATION = "clarification"
    RESULTS = "results"


def has_field_markers(text: str) -> bool:
    return FIELD_MARKER_RE.search(text) is not None


def classify_response(text: str) -> ResponseKind:
    """Decide whether a reply is a follow-up question or a grant listing.

    A reply is a question when it contains "?" and none of the bold field
    labels. A listing that ends in a rhetorical question still counts as
    results as long as one label is present.
    """
    if "?" in text and not has_field_markers(text):
        return ResponseKind.CLARIFICATION
    return ResponseKind.RESULTS


def _field_pattern(label: str) -> re.Pattern:
    pattern = _field_patterns.get(label)
    if pattern is None:
        pattern = re.compile(
            r"- \*\*" + re.escape(label) + r":\*\*[ \t]*(.+)",
            re.IGNORECASE,
        )
        _field_patterns[label] = pattern
    return pattern


def _field(section: str, label: str, default: str = NOT_SPECIFIED) -> str:
    match = _field_pattern(label).search(section)
    if not match:
        return default
    value = match.group(1).strip()
    return value or default


def _title(section: str) -> str:
    for pattern in TITLE_PATTERNS:
        match = pattern.search(section)
        if match:
            title = match.group(1).replace("**", "").strip()
            return title or UNKNOWN_TITLE
    return UNKNOWN_TITLE


def split_sections(text: str) -> list[str]:
    """Split a listing into one trimmed block per numbered grant entry.

    Blocks that are too short, carry no field labels, or read like the
    model's preamble ("Here are...") are dropped. Order is preserved.
    """
    sections = []
    for candidate in SECTION_BOUNDARY_RE.split(text):
        trimmed = candidate.strip()
        if len(trimmed) < MIN_SECTION_LENGTH:
            continue
        if not has_field_markers(trimmed):
            logger.debug(f"Skipping section without field labels: {trimmed[:60]!r}")
            continue
        if INTRO_RE.match(trimmed):
            logger.debug(f"Skipping introductory section: {trimmed[:60]!r}")
            continue
        sections.append(trimmed)
    return sections


def _extract(section: str) -> Optional[GrantRecord]:
    title = _title(section)
    if INTRO_RE.match(title):
        return None

    category_of_funding = _field(section, "Category of Funding")
    if category_of_funding != NOT_SPECIFIED:
        category = [c.strip() for c in re.split(r",\s*", category_of_funding)]
    else:
        category = []

    eligibility_text = _field(section, "Eligibility", default="")

    details = DETAILS_RE.search(section)
    description = details.group(1).strip() if details else ""

    more_info = MORE_INFO_RE.search(section)
    link = LINK_RE.search(section)

    return GrantRecord(
        title=title,
        agency=_field(section, "Category", default="Agency not specified"),
        opportunity_number=_field(section, "Funding Opportunity Number"),
        deadline=_field(section, "Closing Date"),
        total_funding=_field(section, "Total Program Funding"),
        category_of_funding=category_of_funding,
        expected_awards=_field(section, "Expected Number of Awards"),
        posted_date=_field(section, "Posted Date"),
        eligibility=[eligibility_text] if eligibility_text else [],
        description=description or "No description available",
        category=category,
        application_link=link.group(2).strip() if link else "",
        more_info_url=more_info.group(1).strip() if more_info else "",
        match_reason=f"Matches your search criteria for {title.lower()}",
    )


@dataclass
class SectionOutcome:
    """What happened to one candidate section."""
    section: str
    record: Optional[GrantRecord] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.record is not None


def extract_outcome(section: str) -> SectionOutcome:
    """Extract one section, capturing any failure instead of raising."""
    try:
        record = _extract(section)
    except Exception as e:
        logger.warning(f"Failed to extract grant from section: {e}")
        return SectionOutcome(section=section, error=str(e))
    if record is None:
        return SectionOutcome(section=section, error="no usable title")
    return SectionOutcome(section=section, record=record)


def extract_grant(section: str) -> Optional[GrantRecord]:
    """Parse one section into a GrantRecord, or None if it is unusable."""
    return extract_outcome(section).record


@dataclass
class ParseReport:
    """A parse result plus counts for diagnostics."""
    result: SearchResult
    sections: int = 0
    failures: list[SectionOutcome] = field(default_factory=list)

    @property
    def extracted(self) -> int:
        if isinstance(self.result, ClarificationResult):
            return 0
        return len(self.result)


class ResponseParser:
    """Turns a raw model reply into a SearchResult.

    The classifier is swappable so a structured-output contract can replace
    the "?" heuristic without touching callers.
    """

    def __init__(self, classifier: Callable[[str], ResponseKind] = classify_response):
        self.classifier = classifier

    def parse_with_stats(self, text: str) -> ParseReport:
        """Parse a reply and report how many sections were kept or lost.

        Args:
            text: Raw reply text from the completion service

        Returns:
            ParseReport wrapping either a ClarificationResult or a list of
            GrantRecord in the order the model listed them
        """
        if self.classifier(text) is ResponseKind.CLARIFICATION:
            logger.info("Reply is a clarification question")
            return ParseReport(result=ClarificationResult(message=text))

        sections = split_sections(text)
        grants = []
        failures = []
        for section in sections:
            outcome = extract_outcome(section)
            if outcome.ok:
                grants.append(outcome.record)
            else:
                failures.append(outcome)

        if failures:
            logger.info(f"Dropped {len(failures)} of {len(sections)} sections")
        logger.debug(f"Parsed {len(grants)} grants")
        return ParseReport(result=grants, sections=len(sections), failures=failures)

    def parse(self, text: str) -> SearchResult:
        return self.parse_with_stats(text).result
