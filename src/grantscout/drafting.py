"""Grant application drafting.

An application is written section by section. Each section gets its own
completion call so a single section can be regenerated without touching
the rest of the draft.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from .gateway import CompletionGateway, CompletionOptions
from .models import ClientProfile, GrantRecord
from .prompts import DRAFTING_INSTRUCTION

logger = logging.getLogger(__name__)

APPLICATION_SECTIONS = (
    ("problem-statement", "Problem Statement"),
    ("project-description", "Project Description"),
    ("methodology", "Methodology"),
    ("evaluation", "Evaluation Plan"),
    ("budget-narrative", "Budget Narrative"),
    ("organizational-capacity", "Organizational Capacity"),
)

SECTION_GUIDANCE = {
    "problem-statement": "Describe the need or problem the project addresses and who is affected.",
    "project-description": "Describe the project, its goals and the activities that will reach them.",
    "methodology": "Explain how the work will be carried out, including phases and milestones.",
    "evaluation": "Explain how progress and outcomes will be measured and reported to the funder.",
    "budget-narrative": "Explain how the requested funds will be spent and why each cost is needed.",
    "organizational-capacity": "Show why the organization is able to deliver the project.",
}

DRAFTING_OPTIONS = CompletionOptions(temperature=0.7, max_tokens=1200)


def section_title(section_id: str) -> str:
    for sid, title in APPLICATION_SECTIONS:
        if sid == section_id:
            return title
    valid = ", ".join(sid for sid, _ in APPLICATION_SECTIONS)
    raise ValueError(f"Unknown section '{section_id}'. Valid sections: {valid}")


@dataclass
class ApplicationContext:
    """Everything the writer knows about the application being drafted."""
    client: ClientProfile
    grant: Optional[GrantRecord] = None
    project_title: str = ""
    project_summary: str = ""
    requested_amount: Optional[int] = None
    timeline: str = ""


@dataclass
class ApplicationDraft:
    context: ApplicationContext
    sections: dict[str, str] = field(default_factory=dict)

    @property
    def title(self) -> str:
        if self.context.project_title:
            return self.context.project_title
        if self.context.grant:
            return f"{self.context.client.name}: {self.context.grant.title}"
        return f"{self.context.client.name} Grant Application"

    def is_complete(self) -> bool:
        return all(self.sections.get(sid) for sid, _ in APPLICATION_SECTIONS)

    def to_markdown(self) -> str:
        lines = [f"# {self.title}", ""]
        grant = self.context.grant
        if grant:
            lines.append(f"**Grant:** {grant.title}")
            lines.append(f"**Opportunity Number:** {grant.opportunity_number}")
            lines.append(f"**Deadline:** {grant.deadline}")
            lines.append("")
        for sid, title in APPLICATION_SECTIONS:
            if sid not in self.sections:
                continue
            lines.append(f"## {title}")
            lines.append(self.sections[sid].strip())
            lines.append("")
        return "\n".join(lines).rstrip() + "\n"


def build_section_prompt(context: ApplicationContext, section_id: str,
                         current_text: Optional[str] = None) -> str:
    """Build the prompt for one application section."""
    title = section_title(section_id)
    client = context.client

    focus = ", ".join(client.focus_areas) or client.industry_focus_area or "Not specified"
    prompt = "\n".join([
        f'Write the "{title}" section of a grant application.',
        SECTION_GUIDANCE[section_id],
        "",
        "## Organization",
        f"- Name: {client.name}",
        f"- Mission: {client.mission_statement or 'Not specified'}",
        f"- Focus areas: {focus}",
    ])

    if client.location:
        prompt += f"\n- Location: {client.location}"

    project_lines = []
    if context.project_title:
        project_lines.append(f"- Title: {context.project_title}")
    if context.project_summary:
        project_lines.append(f"- Summary: {context.project_summary}")
    if context.requested_amount:
        project_lines.append(f"- Requested amount: ${context.requested_amount:,}")
    if context.timeline:
        project_lines.append(f"- Timeline: {context.timeline}")
    if project_lines:
        prompt += "\n\n## Project\n" + "\n".join(project_lines)

    grant = context.grant
    if grant:
        prompt += "\n\n## Grant\n" + "\n".join([
            f"- Name: {grant.title}",
            f"- Funding Opportunity Number: {grant.opportunity_number}",
            f"- Category of Funding: {grant.category_of_funding}",
            f"- Total Program Funding: {grant.total_funding}",
            f"- Eligibility: {'; '.join(grant.eligibility) or 'Not specified'}",
            f"- Details: {grant.description}",
        ])

    if current_text:
        prompt += (
            "\n\n## Current draft\n"
            f"{current_text.strip()}\n\n"
            "Rewrite this draft to be more specific and persuasive, keeping any facts it states."
        )

    return prompt


class ApplicationDrafter:
    """Drafts application sections through a completion gateway."""

    def __init__(self, gateway: CompletionGateway, options: Optional[CompletionOptions] = None):
        self.gateway = gateway
        self.options = options or DRAFTING_OPTIONS

    async def draft_section(self, context: ApplicationContext, section_id: str) -> str:
        prompt = build_section_prompt(context, section_id)
        logger.info(f"Drafting section '{section_id}' for {context.client.name}")
        return await self.gateway.complete(DRAFTING_INSTRUCTION, prompt, self.options)

    async def regenerate_section(self, context: ApplicationContext, section_id: str,
                                 current_text: str) -> str:
        prompt = build_section_prompt(context, section_id, current_text=current_text)
        logger.info(f"Regenerating section '{section_id}' for {context.client.name}")
        return await self.gateway.complete(DRAFTING_INSTRUCTION, prompt, self.options)

    async def draft_application(self, context: ApplicationContext,
                                section_ids: Optional[list[str]] = None) -> ApplicationDraft:
        """Draft the requested sections (all of them by default) in order.

        Sections are drafted one after another; a CompletionFailure stops
        the draft and propagates.
        """
        wanted = section_ids or [sid for sid, _ in APPLICATION_SECTIONS]
        for sid in wanted:
            section_title(sid)

        draft = ApplicationDraft(context=context)
        for sid, _ in APPLICATION_SECTIONS:
            if sid in wanted:
                draft.sections[sid] = await self.draft_section(context, sid)
        return draft
