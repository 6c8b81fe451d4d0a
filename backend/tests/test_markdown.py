"""
Tests for the resume Markdown assembly helpers.
"""

import pytest
from pydantic import ValidationError

from app.core.markdown import (
    build_resume_markdown,
    contact_markdown,
    entries_to_markdown,
    format_display_date,
)
from app.schemas.resume import ContactInfo, ResumeEntry, ResumeForm


def entry(**fields):
    values = dict(
        title="Backend Engineer",
        organization="Acme",
        startDate="2021-03",
        endDate="2023-07",
        description="Built APIs.",
    )
    values.update(fields)
    return ResumeEntry(**values)


class TestFormatDisplayDate:

    def test_month_value_is_formatted(self):
        assert format_display_date("2023-04") == "Apr 2023"

    def test_empty_value(self):
        assert format_display_date("") == ""
        assert format_display_date(None) == ""

    def test_already_formatted_value_is_kept(self):
        assert format_display_date("Apr 2023") == "Apr 2023"


class TestEntriesToMarkdown:

    def test_no_entries_renders_nothing(self):
        assert entries_to_markdown([], "Education") == ""

    def test_entries_render_with_date_ranges(self):
        markdown = entries_to_markdown(
            [entry(), entry(title="Lead", startDate="2023-08", endDate=None, current=True)],
            "Work Experience",
        )
        assert markdown == (
            "## Work Experience\n\n"
            "### Backend Engineer @ Acme\nMar 2021 - Jul 2023\n\nBuilt APIs.\n\n"
            "### Lead @ Acme\nAug 2023 - Present\n\nBuilt APIs."
        )


class TestResumeEntryValidation:

    def test_end_date_required_unless_current(self):
        with pytest.raises(ValidationError):
            entry(endDate=None)

    def test_current_entry_needs_no_end_date(self):
        assert entry(endDate=None, current=True).current is True


class TestBuildResumeMarkdown:

    def test_contact_line_is_centred_under_name(self):
        markdown = contact_markdown(ContactInfo(email="ada@example.com", linkedin="https://linkedin.com/in/ada"), "Ada")
        assert markdown.startswith('## <div align="center">Ada</div>')
        assert "📧 ada@example.com | 💼 [LinkedIn](https://linkedin.com/in/ada)" in markdown

    def test_no_contact_details_renders_no_header(self):
        assert contact_markdown(ContactInfo(), "Ada") == ""

    def test_sections_in_order_and_empty_ones_dropped(self):
        form = ResumeForm(
            contactInfo=ContactInfo(email="ada@example.com"),
            summary="Engineer.",
            skills="",
            experience=[entry()],
            projects=[entry(title="Compiler", organization="Side project")],
        )

        markdown = build_resume_markdown(form, "Ada")

        headings = [line for line in markdown.splitlines() if line.startswith("## ")]
        assert headings == [
            '## <div align="center">Ada</div>',
            "## Professional Summary",
            "## Work Experience",
            "## Projects",
        ]

    def test_empty_form_renders_empty_document(self):
        assert build_resume_markdown(ResumeForm(), "Ada") == ""
