"""
Assembly of the resume builder's Markdown document from its structured form.
"""

from datetime import datetime
from typing import List, Optional

from app.schemas.resume import ContactInfo, ResumeEntry, ResumeForm


def format_display_date(value: Optional[str]) -> str:
    """Turns a month-picker value ("2023-04") into display form ("Apr 2023")."""
    if not value:
        return ""
    try:
        return datetime.strptime(value, "%Y-%m").strftime("%b %Y")
    except ValueError:
        # Already formatted, or free text typed by the user.
        return value


def entries_to_markdown(entries: List[ResumeEntry], title: str) -> str:
    if not entries:
        return ""

    blocks = []
    for entry in entries:
        start = format_display_date(entry.startDate)
        if entry.current:
            date_range = f"{start} - Present"
        else:
            date_range = f"{start} - {format_display_date(entry.endDate)}"
        blocks.append(f"### {entry.title} @ {entry.organization}\n{date_range}\n\n{entry.description}")
    return f"## {title}\n\n" + "\n\n".join(blocks)


def contact_markdown(contact: ContactInfo, full_name: Optional[str]) -> str:
    parts = []
    if contact.email:
        parts.append(f"📧 {contact.email}")
    if contact.mobile:
        parts.append(f"📱 {contact.mobile}")
    if contact.linkedin:
        parts.append(f"💼 [LinkedIn]({contact.linkedin})")
    if contact.twitter:
        parts.append(f"🐦 [Twitter]({contact.twitter})")

    if not parts:
        return ""
    return (
        f'## <div align="center">{full_name or ""}</div>\n\n'
        f'<div align="center">\n\n{" | ".join(parts)}\n\n</div>'
    )


def build_resume_markdown(form: ResumeForm, full_name: Optional[str]) -> str:
    """
    Renders the whole resume; sections without content are left out.
    """
    sections = [
        contact_markdown(form.contactInfo, full_name),
        f"## Professional Summary\n\n{form.summary}" if form.summary else "",
        f"## Skills\n\n{form.skills}" if form.skills else "",
        entries_to_markdown(form.experience, "Work Experience"),
        entries_to_markdown(form.education, "Education"),
        entries_to_markdown(form.projects, "Projects"),
    ]
    return "\n\n".join(section for section in sections if section)
