"""
grantscout - Find grant opportunities and draft applications with an LLM.

This package asks a chat-completion service for grants that match a search,
parses the markdown reply into structured grant records, and drafts grant
application sections for an organization.
"""

from .models import ClarificationResult, ClientProfile, FundingRange, GrantRecord, SearchQuery
from .gateway import CompletionFailure, CompletionOptions, GeminiGateway, OpenAIGateway
from .parser import ResponseParser, classify_response, extract_grant, split_sections
from .query import build_prompt, build_suggestion_query
from .finder import GrantFinder
from .drafting import ApplicationContext, ApplicationDrafter

__version__ = "0.1.0"
__all__ = [
    "ClarificationResult",
    "ClientProfile",
    "FundingRange",
    "GrantRecord",
    "SearchQuery",
    "CompletionFailure",
    "CompletionOptions",
    "GeminiGateway",
    "OpenAIGateway",
    "ResponseParser",
    "classify_response",
    "extract_grant",
    "split_sections",
    "build_prompt",
    "build_suggestion_query",
    "GrantFinder",
    "ApplicationContext",
    "ApplicationDrafter",
]
