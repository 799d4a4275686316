"""Tests for newsletter parsing and HTML rendering."""

from datetime import date

from content_studio.newsletters import (
    NewsletterSection,
    ParsedNewsletter,
    format_edition_date,
    markdown_to_html,
    parse_any_newsletter,
    parse_dashed_newsletter,
    parse_newsletter_content,
    render_newsletter_html,
    should_include_date,
)

MARKDOWN_NEWSLETTER = """# AI Weekly

## Subject Line
This week in AI

## Top Story
Big things happened.

## Quick Hits
- Item one
- Item two

## Call to Action
Subscribe to stay updated.

## Footer
Copyright 2024"""

DASHED_NEWSLETTER = """Title: The Future of Work
---
Introduction: Work is changing.
---
Section: Remote Teams
Content: Distributed teams are the norm.
---
Section: AI Assistants
Content: Copilots everywhere.
---
Conclusion: Adapt early.
---
Call to Action: Share this with your team."""


class TestParseNewsletterContent:
    def test_markdown_sections(self):
        parsed = parse_newsletter_content(MARKDOWN_NEWSLETTER)
        assert parsed.title == "AI Weekly"
        assert parsed.subject == "This week in AI"
        assert [s.title for s in parsed.sections] == ["Top Story", "Quick Hits"]
        assert parsed.sections[1].content == "- Item one\n- Item two"
        assert parsed.call_to_action == "Subscribe to stay updated."
        assert parsed.footer == "Copyright 2024"

    def test_subject_defaults_to_title(self):
        parsed = parse_newsletter_content("# Hello\n\n## Intro\nWelcome.")
        assert parsed.subject == "Hello"

    def test_headingless_content_becomes_main_content(self):
        parsed = parse_newsletter_content("Just some text.\n\nAnother paragraph.")
        assert len(parsed.sections) == 1
        assert parsed.sections[0].title == "Main Content"
        assert parsed.sections[0].content == "Just some text.\n\nAnother paragraph."
        assert parsed.call_to_action is None

    def test_call_to_action_found_in_trailing_lines(self):
        parsed = parse_newsletter_content("Text here.\n\nClick here to learn more")
        assert parsed.call_to_action == "Click here to learn more"


class TestParseDashedNewsletter:
    def test_blocks(self):
        parsed = parse_dashed_newsletter(DASHED_NEWSLETTER)
        assert parsed.title == "The Future of Work"
        assert parsed.subject == "The Future of Work"
        assert [s.title for s in parsed.sections] == [
            "Introduction",
            "Remote Teams",
            "AI Assistants",
            "Conclusion",
        ]
        assert parsed.sections[1].content == "Distributed teams are the norm."
        assert parsed.call_to_action == "Share this with your team."

    def test_unlabelled_block_continues_previous_section(self):
        parsed = parse_dashed_newsletter("Title: T\n---\nIntroduction: Hello.\n---\nMore words.")
        assert parsed.sections[0].content == "Hello.\n\nMore words."

    def test_parse_any_picks_parser_by_shape(self):
        assert parse_any_newsletter(DASHED_NEWSLETTER).title == "The Future of Work"
        assert parse_any_newsletter(MARKDOWN_NEWSLETTER).title == "AI Weekly"


class TestDates:
    def test_should_include_date(self):
        assert should_include_date("Latest trends")
        assert should_include_date("Gardening", "weekly-digest")
        assert not should_include_date("Gardening", "tech-trends")
        assert not should_include_date(None)

    def test_format_edition_date(self):
        assert format_edition_date(date(2024, 3, 5)) == "March 5, 2024"


class TestMarkdownToHtml:
    def test_inline_formatting(self):
        html = markdown_to_html("**bold** and *it* [link](http://x.y)")
        assert html == '<strong>bold</strong> and <em>it</em> <a href="http://x.y">link</a>'

    def test_lists(self):
        html = markdown_to_html("- one\n- two\n")
        assert "<ul><li>one</li>" in html
        assert "<li>two</li>" in html

    def test_empty(self):
        assert markdown_to_html("") == ""
        assert markdown_to_html(None) == ""

    def test_raw_html_is_escaped(self):
        html = markdown_to_html("<script>alert(1)</script> & <b>bold</b>")
        assert "<script>" not in html
        assert "&lt;script&gt;alert(1)&lt;/script&gt; &amp; &lt;b&gt;" in html

    def test_only_web_and_mail_links_are_kept(self):
        html = markdown_to_html("[x](javascript:alert(2)) [mail](mailto:a@b.c) [y](https://ok.example)")
        assert "javascript:" not in html
        assert '<a href="mailto:a@b.c">mail</a>' in html
        assert '<a href="https://ok.example">y</a>' in html

    def test_link_attribute_cannot_be_broken_out_of(self):
        html = markdown_to_html('[x](https://a.example/" onmouseover="alert(1))')
        assert '" onmouseover' not in html
        assert "&#34; onmouseover=&#34;" in html


class TestRenderNewsletterHtml:
    def test_renders_sections_and_cta(self):
        html = render_newsletter_html(parse_dashed_newsletter(DASHED_NEWSLETTER))
        assert "<h1>The Future of Work</h1>" in html
        assert "<h2>Remote Teams</h2>" in html
        assert 'class="cta"' in html
        assert "Share this with your team." in html

    def test_title_is_escaped_and_defaulted(self):
        html = render_newsletter_html(ParsedNewsletter(title="A & B"))
        assert "A &amp; B" in html
        assert "<h1>Newsletter</h1>" in render_newsletter_html(ParsedNewsletter())

    def test_section_markdown_is_rendered(self):
        newsletter = ParsedNewsletter(title="T", sections=[NewsletterSection("S", "**Key** point")])
        assert "<strong>Key</strong> point" in render_newsletter_html(newsletter)

    def test_section_html_from_content_is_escaped(self):
        newsletter = ParsedNewsletter(title="T", sections=[NewsletterSection("S", "<img src=x onerror=alert(1)>")])
        html = render_newsletter_html(newsletter)
        assert "<img" not in html
        assert "&lt;img src=x onerror=alert(1)&gt;" in html
