"""Grant search orchestration."""

import logging
from typing import Optional

from .gateway import CompletionGateway, CompletionOptions
from .models import ClientProfile, SearchQuery, SearchResult, is_clarification
from .parser import ResponseParser
from .prompts import SYSTEM_INSTRUCTION
from .query import build_prompt, build_suggestion_query

logger = logging.getLogger(__name__)


class GrantFinder:
    """Runs a search end to end: prompt, completion, parse.

    The completion call is the only await. A CompletionFailure from the
    gateway propagates to the caller untouched; parsing problems only ever
    shrink the result list.
    """

    def __init__(self, gateway: CompletionGateway, parser: Optional[ResponseParser] = None,
                 options: Optional[CompletionOptions] = None,
                 system_instruction: str = SYSTEM_INSTRUCTION):
        self.gateway = gateway
        self.parser = parser or ResponseParser()
        self.options = options or CompletionOptions()
        self.system_instruction = system_instruction

    async def search(self, query: SearchQuery) -> SearchResult:
        """Search for grants matching a query.

        Args:
            query: The structured search request

        Returns:
            A list of GrantRecord (possibly empty) or a ClarificationResult

        Raises:
            ValueError: If the query has no search term
            CompletionFailure: If the completion service call fails
        """
        query.validate()
        prompt = build_prompt(query)
        logger.info(f"Searching: {prompt}")

        raw = await self.gateway.complete(self.system_instruction, prompt, self.options)
        logger.debug(f"Raw reply:\n{raw}")

        report = self.parser.parse_with_stats(raw)
        if is_clarification(report.result):
            logger.info("Model asked for clarification")
        else:
            logger.info(f"Found {report.extracted} grants in {report.sections} sections")
        return report.result

    async def get_grant_suggestions(self, org_name: str, mission: str,
                                    focus_areas: list[str]) -> SearchResult:
        """Search for grants suited to an organization's focus areas."""
        return await self.search(build_suggestion_query(org_name, mission, focus_areas))

    async def suggest_for_client(self, client: ClientProfile) -> SearchResult:
        focus_areas = client.focus_areas or [a for a in [client.industry_focus_area] if a]
        return await self.get_grant_suggestions(client.name, client.mission_statement, focus_areas)
