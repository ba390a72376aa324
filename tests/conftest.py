"""Shared fixtures: canned model replies and a fake completion gateway."""

import pytest

from grantscout.gateway import CompletionFailure


THREE_GRANTS = """Certainly! Here are the top 3 grants that match your search:

### 1. Climate Resilience Planning Grant
- **Funding Opportunity Number:** EPA-R2-2025-01
- **Category of Funding:** Environment, Climate
- **Posted Date:** January 10, 2025
- **Closing Date:** March 15, 2025
- **Total Program Funding:** $2,500,000
- **Expected Number of Awards:** 10
- **Eligibility:** Non-profits and local governments in New York
- **Details:** Supports community planning for climate adaptation.
- \U0001F517 [More Info](https://www.grants.gov/climate-1)

### 2. Clean Energy Communities Fund
- **Funding Opportunity Number:** NYSERDA-CEC-2025
- **Category of Funding:** Energy
- **Posted Date:** Not specified
- **Closing Date:** Rolling
- **Total Program Funding:** $10 million
- **Expected Number of Awards:** Not specified
- **Eligibility:** Municipalities
- **Details:** Funds clean energy upgrades in public buildings.
- \U0001F517 [More Info](https://www.nyserda.ny.gov/cec)

### 3. Urban Forestry Grant
- **Funding Opportunity Number:** Not specified
- **Category of Funding:** Environment
- **Posted Date:** 2025-02-01
- **Closing Date:** 2025-04-30
- **Total Program Funding:** $750,000
- **Expected Number of Awards:** 5
- **Eligibility:** 501(c)(3) organizations
- **Details:** Tree planting and canopy expansion in underserved neighborhoods.
- \U0001F517 [Apply Here](https://www.dec.ny.gov/forestry)

Let me know if you would like help preparing an application!
"""

CLARIFICATION = (
    "Could you tell me which category of funding you are looking for? "
    "For example Education, Climate, Health or Research?"
)


class FakeGateway:
    """Returns canned replies and records every call."""

    def __init__(self, replies=None, error=None):
        self.replies = list(replies or [])
        self.error = error
        self.calls = []

    async def complete(self, system_instruction, user_prompt, options=None):
        self.calls.append((system_instruction, user_prompt, options))
        if self.error:
            raise self.error
        if not self.replies:
            raise CompletionFailure("No response from fake")
        if len(self.replies) == 1:
            return self.replies[0]
        return self.replies.pop(0)


@pytest.fixture
def three_grants():
    return THREE_GRANTS


@pytest.fixture
def clarification():
    return CLARIFICATION


@pytest.fixture
def make_gateway():
    return FakeGateway
