"""Tests for the grant reply parser."""

import pytest

from grantscout import parser as parser_module
from grantscout.models import ClarificationResult
from grantscout.parser import (
    MIN_SECTION_LENGTH,
    ResponseKind,
    ResponseParser,
    classify_response,
    extract_grant,
    extract_outcome,
    split_sections,
)

LINK = "\U0001F517"


def padded_section(length: int) -> str:
    section = "1. A\n- **Details:** "
    return section + "x" * (length - len(section))


class TestClassifyResponse:
    def test_question_without_labels(self, clarification):
        assert classify_response(clarification) is ResponseKind.CLARIFICATION

    def test_listing(self, three_grants):
        assert classify_response(three_grants) is ResponseKind.RESULTS

    def test_no_question_mark(self):
        assert classify_response("None found.") is ResponseKind.RESULTS

    def test_labels_are_case_insensitive(self):
        text = "Is this right?\n- **eligibility:** anyone"
        assert classify_response(text) is ResponseKind.RESULTS

    def test_question_quoting_a_label_reads_as_results(self):
        # Known false negative of the heuristic.
        text = "Should I filter on - **Eligibility:** for nonprofits only?"
        assert classify_response(text) is ResponseKind.RESULTS


class TestSplitSections:
    def test_three_sections_in_order(self, three_grants):
        sections = split_sections(three_grants)
        assert len(sections) == 3
        assert sections[0].startswith("### 1. Climate Resilience")
        assert sections[1].startswith("### 2. Clean Energy")
        assert sections[2].startswith("### 3. Urban Forestry")

    def test_bold_numbered_entries(self):
        text = (
            "**1. First Grant**\n- **Funding Opportunity Number:** A-1\n- **Details:** first\n"
            "**2. Second Grant**\n- **Funding Opportunity Number:** B-2\n- **Details:** second\n"
        )
        sections = split_sections(text)
        assert [s.splitlines()[0] for s in sections] == ["**1. First Grant**", "**2. Second Grant**"]

    def test_preamble_is_dropped(self):
        text = (
            "Here are the grants - **Details:** I found for you after a long search\n"
            + padded_section(80)
        )
        sections = split_sections(text)
        assert len(sections) == 1
        assert sections[0].startswith("1. A")

    def test_title_only_section_is_dropped(self):
        text = "1. A Very Long Grant Title Without Any Field Labels Whatsoever In It\n"
        assert split_sections(text) == []

    def test_length_boundary(self):
        short = padded_section(MIN_SECTION_LENGTH - 1)
        exact = padded_section(MIN_SECTION_LENGTH)
        assert len(short) == 49
        assert len(exact) == 50
        assert split_sections(short) == []
        assert split_sections(exact) == [exact]

    def test_no_cap_on_count(self):
        text = "\n".join(padded_section(60).replace("1.", f"{i}.", 1) for i in range(1, 8))
        assert len(split_sections(text)) == 7


class TestExtractGrant:
    def test_full_section(self, three_grants):
        grant = extract_grant(split_sections(three_grants)[0])
        assert grant.title == "Climate Resilience Planning Grant"
        assert grant.agency == "Agency not specified"
        assert grant.opportunity_number == "EPA-R2-2025-01"
        assert grant.category_of_funding == "Environment, Climate"
        assert grant.category == ["Environment", "Climate"]
        assert grant.posted_date == "January 10, 2025"
        assert grant.deadline == "March 15, 2025"
        assert grant.total_funding == "$2,500,000"
        assert grant.expected_awards == "10"
        assert grant.eligibility == ["Non-profits and local governments in New York"]
        assert grant.description == "Supports community planning for climate adaptation."
        assert grant.more_info_url == "https://www.grants.gov/climate-1"
        assert grant.application_link == "https://www.grants.gov/climate-1"
        assert grant.match_reason == "Matches your search criteria for climate resilience planning grant"

    def test_generic_link_is_application_link_only(self, three_grants):
        grant = extract_grant(split_sections(three_grants)[2])
        assert grant.more_info_url == ""
        assert grant.application_link == "https://www.dec.ny.gov/forestry"

    def test_missing_fields_use_defaults(self):
        grant = extract_grant("### 4. Sparse Grant\n- **Closing Date:** June 1, 2025")
        assert grant.title == "Sparse Grant"
        assert grant.deadline == "June 1, 2025"
        assert grant.opportunity_number == "Not specified"
        assert grant.total_funding == "Not specified"
        assert grant.eligibility == []
        assert grant.category == []
        assert grant.description == "No description available"
        assert grant.application_link == ""
        assert grant.more_info_url == ""

    def test_agency_from_category_label(self):
        grant = extract_grant("1. X\n- **Category:** Department of Energy\n- **Category of Funding:** Energy")
        assert grant.agency == "Department of Energy"
        assert grant.category_of_funding == "Energy"

    def test_trailing_comma_keeps_empty_category(self):
        grant = extract_grant("1. X\n- **Category of Funding:** Education, ")
        assert grant.category_of_funding == "Education,"
        assert grant.category == ["Education", ""]

    def test_eligibility_and_details_with_link(self):
        section = (
            "1. Small Arts Grant\n"
            "- **Eligibility:** Non-profits only\n"
            f"- **Details:** Funds community murals. {LINK} [More Info](http://x)"
        )
        grant = extract_grant(section)
        assert grant.eligibility == ["Non-profits only"]
        assert grant.description == "Funds community murals."
        assert grant.more_info_url == "http://x"

    def test_details_stop_at_blank_line(self):
        section = "1. T\n- **Details:** line one\ncontinues here\n\nClosing remarks"
        assert extract_grant(section).description == "line one\ncontinues here"

    @pytest.mark.parametrize("section,title", [
        ("### 2. Heading Title\n- **Details:** d", "Heading Title"),
        ("## 1. Second Level Heading\n- **Funding Opportunity Number:** A-1", "Second Level Heading"),
        ("# 4. Top Level Heading\n- **Funding Opportunity Number:** A-1", "Top Level Heading"),
        ("3. Plain Title\n- **Details:** d", "Plain Title"),
        ("1. **Bold Inside**\n- **Details:** d", "Bold Inside"),
        ("**5. Bold Numbered**\n- **Details:** d", "Bold Numbered"),
        ("Intro line\n**Bold Name** follows\n- **Details:** d", "Bold Name"),
        ("Community Garden Fund\nOpen to all", "Community Garden Fund"),
    ])
    def test_title_fallbacks(self, section, title):
        assert extract_grant(section).title == title

    def test_intro_title_is_rejected(self):
        section = "**Here are the grants I found**\n- **Details:** something"
        assert extract_grant(section) is None
        outcome = extract_outcome(section)
        assert not outcome.ok
        assert outcome.error == "no usable title"

    def test_idempotent(self, three_grants):
        section = split_sections(three_grants)[1]
        assert extract_grant(section) == extract_grant(section)

    def test_exception_becomes_failed_outcome(self, monkeypatch):
        def boom(section):
            raise RuntimeError("bad section")

        monkeypatch.setattr(parser_module, "_extract", boom)
        outcome = extract_outcome("1. X\n- **Details:** y")
        assert outcome.record is None
        assert outcome.error == "bad section"
        assert extract_grant("1. X\n- **Details:** y") is None


class TestResponseParser:
    def test_clarification_keeps_message_verbatim(self, clarification):
        result = ResponseParser().parse(clarification)
        assert isinstance(result, ClarificationResult)
        assert result.needs_clarification is True
        assert result.message == clarification

    def test_three_grants(self, three_grants):
        result = ResponseParser().parse(three_grants)
        assert [g.title for g in result] == [
            "Climate Resilience Planning Grant",
            "Clean Energy Communities Fund",
            "Urban Forestry Grant",
        ]

    def test_second_level_headings(self):
        text = (
            "## 1. Arts Access Fund\n"
            "- **Funding Opportunity Number:** A-1\n"
            "- **Details:** Supports arts programming in rural libraries.\n\n"
            "## 2. Music Fund\n"
            "- **Funding Opportunity Number:** M-2\n"
            "- **Details:** Instruments and lessons for school music programs.\n"
        )
        result = ResponseParser().parse(text)
        assert [g.title for g in result] == ["Arts Access Fund", "Music Fund"]
        assert [g.opportunity_number for g in result] == ["A-1", "M-2"]

    def test_none_found(self):
        assert ResponseParser().parse("None found.") == []

    def test_one_bad_section_does_not_abort_batch(self, three_grants, monkeypatch):
        real_extract = parser_module._extract

        def flaky(section):
            if "Clean Energy" in section:
                raise ValueError("unexpected format")
            return real_extract(section)

        monkeypatch.setattr(parser_module, "_extract", flaky)
        report = ResponseParser().parse_with_stats(three_grants)
        assert [g.title for g in report.result] == [
            "Climate Resilience Planning Grant",
            "Urban Forestry Grant",
        ]
        assert report.sections == 3
        assert report.extracted == 2
        assert len(report.failures) == 1
        assert report.failures[0].error == "unexpected format"

    def test_custom_classifier(self, three_grants):
        parser = ResponseParser(classifier=lambda text: ResponseKind.CLARIFICATION)
        result = parser.parse(three_grants)
        assert isinstance(result, ClarificationResult)
