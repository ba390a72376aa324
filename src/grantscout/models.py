"""Data models for grantscout package."""

import re
from dataclasses import dataclass, asdict, field
from datetime import date, datetime
from typing import Optional, Union

NOT_SPECIFIED = "Not specified"

_DATE_FORMATS = (
    "%Y-%m-%d",
    "%m/%d/%Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%d %B %Y",
    "%B %Y",
    "%b %Y",
)

_AMOUNT_RE = re.compile(
    r"\$\s*([\d,]+(?:\.\d+)?)\s*(billion|million|thousand|[BMK])?\b",
    re.IGNORECASE,
)

_MULTIPLIERS = {
    "k": 1_000,
    "thousand": 1_000,
    "m": 1_000_000,
    "million": 1_000_000,
    "b": 1_000_000_000,
    "billion": 1_000_000_000,
}


def parse_loose_date(text: Optional[str]) -> Optional[date]:
    """Best-effort date parse of model-rendered text. Never raises."""
    if not text:
        return None
    cleaned = text.strip().rstrip(".")
    # "March 15th, 2025" -> "March 15, 2025"
    cleaned = re.sub(r"(\d)(st|nd|rd|th)\b", r"\1", cleaned)
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(cleaned, fmt).date()
        except ValueError:
            continue
    return None


def parse_loose_amount(text: Optional[str]) -> Optional[int]:
    """Pull the first dollar amount out of free text, e.g. "$1.5 million"."""
    if not text:
        return None
    match = _AMOUNT_RE.search(text)
    if not match:
        return None
    try:
        value = float(match.group(1).replace(",", ""))
    except ValueError:
        return None
    suffix = (match.group(2) or "").lower()
    return int(value * _MULTIPLIERS.get(suffix, 1))


@dataclass
class FundingRange:
    """Optional lower/upper funding bounds in whole dollars."""
    min: Optional[int] = None
    max: Optional[int] = None


@dataclass
class SearchQuery:
    """A structured grant search request."""
    search_term: str
    organization: Optional[str] = None
    focus_area: Optional[str] = None
    location: Optional[str] = None
    eligibility_type: Optional[str] = None
    funding_range: Optional[FundingRange] = None

    def validate(self) -> None:
        """Raise ValueError if the query cannot be issued."""
        if not self.search_term or not self.search_term.strip():
            raise ValueError("search_term must be a non-empty string")

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return asdict(self)


@dataclass
class ClarificationResult:
    """The model asked a follow-up question instead of listing grants."""
    message: str
    needs_clarification: bool = True

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return asdict(self)


@dataclass(frozen=True)
class GrantRecord:
    """A grant opportunity extracted from one section of a model reply.

    Dates and amounts stay as the raw text the model produced. The
    ``deadline_date``, ``posted_date_value`` and ``total_funding_amount``
    properties give a parsed view when the text allows it.
    """
    title: str
    agency: str = "Agency not specified"
    opportunity_number: str = NOT_SPECIFIED
    deadline: str = NOT_SPECIFIED
    total_funding: str = NOT_SPECIFIED
    category_of_funding: str = NOT_SPECIFIED
    expected_awards: str = NOT_SPECIFIED
    posted_date: str = NOT_SPECIFIED
    eligibility: list[str] = field(default_factory=list)
    description: str = "No description available"
    category: list[str] = field(default_factory=list)
    application_link: str = ""
    more_info_url: str = ""
    match_reason: str = ""

    @property
    def deadline_date(self) -> Optional[date]:
        return parse_loose_date(self.deadline)

    @property
    def posted_date_value(self) -> Optional[date]:
        return parse_loose_date(self.posted_date)

    @property
    def total_funding_amount(self) -> Optional[int]:
        return parse_loose_amount(self.total_funding)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return asdict(self)


SearchResult = Union[list[GrantRecord], ClarificationResult]


def is_clarification(result: SearchResult) -> bool:
    """True when a search ended with a question rather than results."""
    return isinstance(result, ClarificationResult)


@dataclass
class ClientProfile:
    """An organization seeking funding."""
    name: str
    mission_statement: str = ""
    focus_areas: list[str] = field(default_factory=list)
    industry_focus_area: Optional[str] = None
    location: Optional[str] = None
    contact_person: Optional[str] = None
    contact_info: Optional[str] = None
    tags: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return asdict(self)
