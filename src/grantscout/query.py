"""Turn a SearchQuery into the question sent to the completion service."""

import logging

from .models import SearchQuery

logger = logging.getLogger(__name__)


def _funding_clause(query: SearchQuery) -> str:
    funding = query.funding_range
    if not funding:
        return ""
    # Zero counts as "no bound".
    if funding.min and funding.max:
        return f" with funding between ${funding.min:,} and ${funding.max:,}"
    if funding.min:
        return f" with minimum funding of ${funding.min:,}"
    if funding.max:
        return f" with maximum funding of ${funding.max:,}"
    return ""


def build_prompt(query: SearchQuery) -> str:
    """Build the user prompt for a search.

    Clauses are added in a fixed order and only for fields that are set:
    location, organization, focus area, funding range, eligibility type.

    Args:
        query: The search request. ``search_term`` must already be non-empty.

    Returns:
        A single question ending in "?"
    """
    prompt = f"Can you help me find grants for {query.search_term}"

    if query.location:
        prompt += f" in {query.location}"

    if query.organization:
        prompt += f" for {query.organization}"

    if query.focus_area:
        prompt += f" focusing on {query.focus_area}"

    prompt += _funding_clause(query)

    if query.eligibility_type:
        prompt += f" for {query.eligibility_type}"

    return prompt + "?"


def build_suggestion_query(org_name: str, mission: str, focus_areas: list[str]) -> SearchQuery:
    """Build a search for grants that suit an organization's focus areas.

    ``mission`` is accepted for signature compatibility but is not part of
    the resulting query.
    """
    joined = ", ".join(focus_areas)
    if mission:
        logger.debug(f"Mission for {org_name} is not included in the suggestion query")
    return SearchQuery(
        search_term=joined,
        organization=org_name,
        focus_area=joined,
    )
