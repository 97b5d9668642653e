#!/usr/bin/env python3
"""
Narrative text segmentation and furigana handling.

Paragraphs are the atomic unit of pagination; everything here is a pure
function of its input.
"""

import re

# One or more blank lines (empty or any Unicode whitespace, e.g. U+3000)
PARAGRAPH_BREAK = re.compile(r"\n[^\S\n]*\n\s*")

# Furigana patterns
BRACKET_READING = re.compile(r"《[^》]*》")
LEGACY_FURIGANA = re.compile(r"([一-龯々]+)《([ぁ-ん]+)》")
RUBY_THEN_BRACKET = re.compile(r"<ruby>([^<]+)<rt>[^<]+</rt></ruby>《([^》]+)》")
NESTED_RUBY = re.compile(r"<ruby><ruby>([^<]+)<rt>[^<]+</rt></ruby><rt>([^<]+)</rt></ruby>")
RUBY_ANNOTATION = re.compile(r"<(rt|rp)\b[^>]*>.*?</\1>", re.IGNORECASE | re.DOTALL)
RUBY_TAG = re.compile(r"</?(ruby|rb)\b[^>]*>", re.IGNORECASE)


def split_paragraphs(text: str | None) -> list[str]:
    """Split narrative text on blank lines into trimmed, non-empty paragraphs."""
    if not text:
        return []
    normalized = text.replace("\r\n", "\n")
    return [p.strip() for p in PARAGRAPH_BREAK.split(normalized) if p.strip()]


def parse_furigana(text: str) -> str:
    """
    Normalize furigana to HTML ruby markup.

    Accepts both the bracket form 漢字《かんじ》 and generated <ruby> tags.
    When a ruby tag is followed by a bracket reading for the same word, the
    bracket reading wins.
    """
    if not text:
        return text

    if "<ruby>" in text or "<rt>" in text:
        result = RUBY_THEN_BRACKET.sub(r"<ruby>\1<rt>\2</rt></ruby>", text)
        result = BRACKET_READING.sub("", result)
        return NESTED_RUBY.sub(r"<ruby>\1<rt>\2</rt></ruby>", result)

    return LEGACY_FURIGANA.sub(r"<ruby>\1<rt>\2</rt></ruby>", text)


def visible_text(text: str) -> str:
    """Text as the reader sees it, without ruby readings or ruby markup. Other text is kept as is."""
    if not text:
        return ""
    stripped = RUBY_ANNOTATION.sub("", text)
    stripped = BRACKET_READING.sub("", stripped)
    return RUBY_TAG.sub("", stripped)
