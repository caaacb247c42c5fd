"""Markup-to-text normalization shared by the crawler and the single-page clipper.

The conversion is a fixed sequence of regular-expression rewrites over an HTML
fragment (usually the region isolated by the content extractor):

* ``h1``…``h6``  → ``#``…``######`` lines
* ``p`` / ``br`` → line breaks, ``li`` → ``- `` lines
* ``strong``/``b`` → ``**…**``, ``em``/``i`` → ``*…*``
* ``a``          → its text, the href is dropped
* ``img``        → ``![alt](src)`` when images are kept, otherwise removed
* every other tag is stripped, entities are decoded, whitespace collapsed.

The result is deterministic for a given input and flag.
"""
from __future__ import annotations

import html
import re
from typing import Final, List, Sequence, Tuple

__all__: Sequence[str] = ("markup_to_text", "count_words", "MIN_CONTENT_LENGTH")

#: Normalized content shorter than this is not worth indexing.
MIN_CONTENT_LENGTH: Final[int] = 100

_FLAGS = re.IGNORECASE | re.DOTALL


def _open(name: str) -> str:
    # "<b>" or "<b class=...>", but never "<br>" or "<body>"
    return rf"<{name}(?:\s[^>]*)?>"


def _close(name: str) -> str:
    return rf"</{name}\s*>"


def _pair(name: str) -> re.Pattern[str]:
    return re.compile(rf"{_open(name)}(.*?){_close(name)}", _FLAGS)


_DROP_BLOCKS: Final[List[re.Pattern[str]]] = [
    re.compile(r"<!--.*?-->", re.DOTALL),
    re.compile(r"<script\b[^>]*>.*?</script\s*>", _FLAGS),
    re.compile(r"<style\b[^>]*>.*?</style\s*>", _FLAGS),
]

_REWRITES: Final[List[Tuple[re.Pattern[str], str]]] = [
    *[(_pair(f"h{level}"), "\n" + "#" * level + r" \1" + "\n") for level in range(1, 7)],
    (_pair("p"), r"\n\1\n"),
    (re.compile(r"<br\s*/?>", re.IGNORECASE), "\n"),
    (_pair("li"), r"- \1\n"),
    (re.compile(rf"{_open('ul')}|{_close('ul')}|{_open('ol')}|{_close('ol')}", re.IGNORECASE), "\n"),
    (_pair("strong"), r"**\1**"),
    (_pair("b"), r"**\1**"),
    (_pair("em"), r"*\1*"),
    (_pair("i"), r"*\1*"),
    (_pair("a"), r"\1"),
]

_IMG = re.compile(r"<img\b[^>]*>", re.IGNORECASE)
_ATTR = r"""\b{name}\s*=\s*(?:"([^"]*)"|'([^']*)')"""
_SRC = re.compile(_ATTR.format(name="src"), re.IGNORECASE)
_ALT = re.compile(_ATTR.format(name="alt"), re.IGNORECASE)
_ANY_TAG = re.compile(r"<[^>]+>")

_HSPACE = re.compile(r"[ \t\f\v]+")
_SPACE_AROUND_NEWLINE = re.compile(r" *\n *")
_EXTRA_NEWLINES = re.compile(r"\n{3,}")

_KOREAN_SYLLABLE = re.compile(r"[가-힣]")
_LATIN_WORD = re.compile(r"[A-Za-z]+")


def _attr(pattern: re.Pattern[str], tag: str) -> str:
    match = pattern.search(tag)
    if not match:
        return ""
    return match.group(1) if match.group(1) is not None else match.group(2)


def _image_to_markdown(match: re.Match[str]) -> str:
    tag = match.group(0)
    src = _attr(_SRC, tag)
    if not src:
        return ""
    return f"![{_attr(_ALT, tag)}]({src})"


def markup_to_text(markup: str, *, include_images: bool = False) -> str:
    """Convert an HTML fragment to lightweight markdown text.

    >>> markup_to_text("<h2>Title</h2><p>Hello <b>world</b></p>")
    '## Title\\n\\nHello **world**'
    """
    text = markup.replace("\r\n", "\n").replace("\r", "\n")

    for pattern in _DROP_BLOCKS:
        text = pattern.sub("", text)
    for pattern, replacement in _REWRITES:
        text = pattern.sub(replacement, text)

    text = _IMG.sub(_image_to_markdown if include_images else "", text)
    text = _ANY_TAG.sub("", text)
    text = html.unescape(text).replace("\xa0", " ")

    text = _HSPACE.sub(" ", text)
    text = _SPACE_AROUND_NEWLINE.sub("\n", text)
    text = _EXTRA_NEWLINES.sub("\n\n", text)
    return text.strip()


def count_words(text: str) -> int:
    """Mixed-script word count: one unit per Korean syllable plus one per run of Latin letters."""
    return len(_KOREAN_SYLLABLE.findall(text)) + len(_LATIN_WORD.findall(text))
