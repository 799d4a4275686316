"""
Newsletter parsing and HTML rendering.

Two input shapes are understood: markdown with `#`/`##` headings (what the
newsletter builder asks for) and the `---` separated `Title:` / `Section:`
blocks the HTTP newsletter route asks for. Both parse into `ParsedNewsletter`,
which `render_newsletter_html` turns into an email-ready HTML document.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import List, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup, escape

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
EMAIL_TEMPLATE = "newsletter_email.html"

DATE_KEYWORDS = ("today", "this week", "current", "latest", "recent", "monthly", "weekly", "annual", "yearly")

_env = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    autoescape=select_autoescape(["html"]),
)

_TITLE_RE = re.compile(r"^#\s*(.*?)(?:\n|$)")
_SUBJECT_RE = re.compile(
    r"##\s*(?:Subject(?:\s*Line)?|Email Subject)(?:\s*:)?\s*\n+(.*?)(?:\n+##|\Z)",
    re.IGNORECASE | re.DOTALL,
)
_SECTION_RE = re.compile(
    r"##\s*((?!Subject|CTA|Call to Action|Footer).+?)(?:\s*:)?\s*\n+([\s\S]*?)(?=\n+##|\Z)"
)
_SPECIAL_SECTION_RE = re.compile(r"subject|cta|call to action|footer", re.IGNORECASE)
_CTA_RE = re.compile(r"##\s*(?:CTA|Call to Action)(?:\s*:)?\s*\n+([\s\S]*?)(?=\n+##|\Z)", re.IGNORECASE)
_FOOTER_RE = re.compile(r"##\s*Footer(?:\s*:)?\s*\n+([\s\S]*?)\Z", re.IGNORECASE)
_CTA_LINE_RE = re.compile(r"click here|sign up|learn more|visit|contact|subscribe", re.IGNORECASE)
_FOOTER_LINE_RE = re.compile(r"copyright|rights reserved|unsubscribe", re.IGNORECASE)
_BLANK_LINES_RE = re.compile(r"\n{2,}")

_LABEL_RE = re.compile(r"^(Title|Introduction|Section|Content|Conclusion|Call to Action)\s*:\s*", re.IGNORECASE)

# markdown -> html
_MD_LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")
_MD_BOLD_RE = re.compile(r"\*\*([^*]+)\*\*")
_MD_ITALIC_RE = re.compile(r"\*([^*]+)\*")
_MD_H3_RE = re.compile(r"###\s+([^\n]+)")
_MD_LIST_ITEM_RE = re.compile(r"^-\s+([^\n]+)", re.MULTILINE)
_MD_LIST_RE = re.compile(r"(<li>[^<]+</li>\n)+")
_MD_PARAGRAPH_RE = re.compile(r"\n\n([^<#].*?)\n")
_MD_LINE_BREAK_RE = re.compile(r"\n(?!<)")
_SAFE_LINK_SCHEMES = ("http://", "https://", "mailto:")


@dataclass
class NewsletterSection:
    title: str
    content: str


@dataclass
class ParsedNewsletter:
    title: str = ""
    subject: str = ""
    sections: List[NewsletterSection] = field(default_factory=list)
    call_to_action: Optional[str] = None
    footer: Optional[str] = None


def should_include_date(topic: Optional[str], newsletter_type: Optional[str] = None) -> bool:
    """True when the topic or newsletter type suggests a dated edition."""
    topic = (topic or "").lower()
    newsletter_type = (newsletter_type or "").lower()
    return any(keyword in topic or keyword in newsletter_type for keyword in DATE_KEYWORDS)


def format_edition_date(day: date) -> str:
    return f"{day:%B} {day.day}, {day.year}"


def parse_newsletter_content(content: str) -> ParsedNewsletter:
    result = ParsedNewsletter()

    title_match = _TITLE_RE.match(content)
    if title_match and title_match.group(1):
        result.title = title_match.group(1).strip()

    subject_match = _SUBJECT_RE.search(content)
    if subject_match and subject_match.group(1):
        result.subject = subject_match.group(1).strip()
    elif result.title:
        result.subject = result.title

    for match in _SECTION_RE.finditer(content):
        section_title = match.group(1).strip()
        section_content = match.group(2).strip()
        if section_content and not _SPECIAL_SECTION_RE.search(section_title):
            result.sections.append(NewsletterSection(title=section_title, content=section_content))

    if not result.sections:
        remaining = content
        if title_match:
            remaining = remaining.replace(title_match.group(0), "", 1)
        if subject_match:
            remaining = remaining.replace(subject_match.group(0), "", 1)
        paragraphs = [p.strip() for p in _BLANK_LINES_RE.split(remaining) if p.strip()]
        if paragraphs:
            result.sections.append(NewsletterSection(title="Main Content", content="\n\n".join(paragraphs)))

    cta_match = _CTA_RE.search(content)
    if cta_match and cta_match.group(1):
        result.call_to_action = cta_match.group(1).strip()

    footer_match = _FOOTER_RE.search(content)
    if footer_match and footer_match.group(1):
        result.footer = footer_match.group(1).strip()

    if not result.call_to_action and not result.footer:
        for line in content.split("\n")[-5:]:
            line = line.strip()
            if _CTA_LINE_RE.search(line) and not result.call_to_action:
                result.call_to_action = line
            elif _FOOTER_LINE_RE.search(line) and not result.footer:
                result.footer = line

    return result


def _strip_label(text: str) -> str:
    return _LABEL_RE.sub("", text, count=1).strip()


def parse_dashed_newsletter(content: str) -> ParsedNewsletter:
    """
    Parse the `---` separated format:

        Title: ...
        ---
        Introduction: ...
        ---
        Section: <heading>
        Content: ...
        ---
        Conclusion: ...
        ---
        Call to Action: ...
    """
    result = ParsedNewsletter()

    for block in (chunk.strip() for chunk in content.split("---")):
        if not block:
            continue
        lowered = block.lower()

        if lowered.startswith("title:"):
            result.title = _strip_label(block)
        elif lowered.startswith("introduction:"):
            result.sections.append(NewsletterSection(title="Introduction", content=_strip_label(block)))
        elif lowered.startswith("section:"):
            heading, _, body = block.partition("\n")
            result.sections.append(NewsletterSection(title=_strip_label(heading), content=_strip_label(body)))
        elif lowered.startswith("conclusion:"):
            result.sections.append(NewsletterSection(title="Conclusion", content=_strip_label(block)))
        elif lowered.startswith("call to action:"):
            result.call_to_action = _strip_label(block)
        elif result.sections:
            # Unlabelled text continues the previous section
            previous = result.sections[-1]
            previous.content = f"{previous.content}\n\n{block}".strip()
        else:
            result.sections.append(NewsletterSection(title="Main Content", content=block))

    result.subject = result.title
    if not result.title and not result.sections:
        logger.warning("Newsletter content did not follow the dashed format; falling back to markdown parser")
        return parse_newsletter_content(content)
    return result


def _render_link(match: re.Match) -> str:
    text, target = match.group(1), match.group(2).strip()
    if not target.lower().startswith(_SAFE_LINK_SCHEMES):
        return text
    return f'<a href="{target}">{text}</a>'


def markdown_to_html(markdown: Optional[str]) -> str:
    """Small markdown subset: links, bold, italic, h3, dash lists, paragraphs, line breaks.

    The input is HTML-escaped first; links only keep http(s) and mailto targets.
    """
    if not markdown:
        return ""
    html = _MD_LINK_RE.sub(_render_link, str(escape(markdown)))
    html = _MD_BOLD_RE.sub(r"<strong>\1</strong>", html)
    html = _MD_ITALIC_RE.sub(r"<em>\1</em>", html)
    html = _MD_H3_RE.sub(r"<h3>\1</h3>", html)
    html = _MD_LIST_ITEM_RE.sub(r"<li>\1</li>", html)
    html = _MD_LIST_RE.sub(r"<ul>\g<0></ul>", html)
    html = _MD_PARAGRAPH_RE.sub(r"<p>\1</p>\n", html)
    return _MD_LINE_BREAK_RE.sub("<br>", html)


def render_newsletter_html(newsletter: ParsedNewsletter) -> str:
    template = _env.get_template(EMAIL_TEMPLATE)
    return template.render(
        title=newsletter.title or "Newsletter",
        sections=[
            {"title": section.title, "html": Markup(markdown_to_html(section.content))}
            for section in newsletter.sections
        ],
        call_to_action=Markup(markdown_to_html(newsletter.call_to_action)) if newsletter.call_to_action else None,
        footer=Markup(markdown_to_html(newsletter.footer)) if newsletter.footer else None,
    )


def parse_any_newsletter(content: str) -> ParsedNewsletter:
    """Pick the parser by shape: dashed blocks when a `Title:` label leads, markdown otherwise."""
    if content.lstrip().lower().startswith("title:"):
        return parse_dashed_newsletter(content)
    return parse_newsletter_content(content)
