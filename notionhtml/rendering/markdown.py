"""
Staged markdown → HTML converter for attached `.md` files.

Not a parser: an ordered tuple of pure text → text stages (`PIPELINE`), each
applied once over the whole document. Stage order is part of the contract;
swapping two stages changes the output.

  1. escape             & < >
  2. fenced_code        ```lang … ```      → <pre><code>
  3. inline_code        `x`                → <code>
  4. headings           ### / ## / #       → <h4> / <h3> / <h2>
  5. emphasis           **x** __x__, *x* _x_ → <strong>, <em>
  6. horizontal_rules   --- / ***          → <hr>
  7. unordered_lists    - x / * x          → <ul><li>
  8. ordered_lists      1. x               → <ol><li>
  9. merge_lists        </ul><ul>, </ol><ol> on adjacent lines are joined
 10. links              [text](url)        → <a target=_blank>
 11. blockquotes        &gt; x             → <blockquote>
 12. paragraphs         any other non-blank, non-block line → <p>

Headings sit one level below their markdown depth so an attachment never
competes with the page's own <h1>.

Code bodies are shielded with numeric character references (newlines and the
markdown punctuation later stages look for), so no later stage can re-match
text inside a code span or block.
"""

from __future__ import annotations

import re
from typing import Callable, Tuple

Stage = Callable[[str], str]

_SHIELD = str.maketrans(
    {
        "\n": "&#10;",
        "*": "&#42;",
        "_": "&#95;",
        "`": "&#96;",
        "[": "&#91;",
    }
)


def _shield(body: str) -> str:
    return body.translate(_SHIELD)


def escape(text: str) -> str:
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


_FENCE_RE = re.compile(r"```[\w+-]*[^\S\n]*\n?(.*?)```", re.DOTALL)


def fenced_code(text: str) -> str:
    def _sub(m: re.Match[str]) -> str:
        return f"<pre><code>{_shield(m.group(1).strip())}</code></pre>"

    return _FENCE_RE.sub(_sub, text)


_INLINE_CODE_RE = re.compile(r"`([^`\n]+)`")


def inline_code(text: str) -> str:
    return _INLINE_CODE_RE.sub(lambda m: f"<code>{_shield(m.group(1))}</code>", text)


_H4_RE = re.compile(r"^### (.+)$", re.MULTILINE)
_H3_RE = re.compile(r"^## (.+)$", re.MULTILINE)
_H2_RE = re.compile(r"^# (.+)$", re.MULTILINE)


def headings(text: str) -> str:
    text = _H4_RE.sub(r"<h4>\1</h4>", text)
    text = _H3_RE.sub(r"<h3>\1</h3>", text)
    return _H2_RE.sub(r"<h2>\1</h2>", text)


_BOLD_STAR_RE = re.compile(r"\*\*([^*\s][^*\n]*?)\*\*")
_BOLD_UNDER_RE = re.compile(r"(?<![\w&#])__([^_\s][^_\n]*?)__(?!\w)")
_EM_STAR_RE = re.compile(r"\*([^*\s][^*\n]*?)\*")
_EM_UNDER_RE = re.compile(r"(?<![\w&#])_([^_\s][^_\n]*?)_(?!\w)")


def emphasis(text: str) -> str:
    # bold first so its markers are consumed before the single-marker pass
    text = _BOLD_STAR_RE.sub(r"<strong>\1</strong>", text)
    text = _BOLD_UNDER_RE.sub(r"<strong>\1</strong>", text)
    text = _EM_STAR_RE.sub(r"<em>\1</em>", text)
    return _EM_UNDER_RE.sub(r"<em>\1</em>", text)


_HR_RE = re.compile(r"^(?:-{3,}|\*{3,})[^\S\n]*$", re.MULTILINE)


def horizontal_rules(text: str) -> str:
    return _HR_RE.sub("<hr>", text)


def _wrap_items(text: str, item_re: "re.Pattern[str]", tag: str) -> str:
    text = item_re.sub(r"<li>\1</li>", text)
    run_re = re.compile(r"^(?:<li>.*</li>(?:\n|$))+", re.MULTILINE)

    def _sub(m: re.Match[str]) -> str:
        block = m.group(0)
        tail = "\n" if block.endswith("\n") else ""
        items = block.replace("\n", "")
        return f"<{tag}>{items}</{tag}>{tail}"

    return run_re.sub(_sub, text)


_UL_ITEM_RE = re.compile(r"^[-*][^\S\n]+(.+)$", re.MULTILINE)
_OL_ITEM_RE = re.compile(r"^\d+\.[^\S\n]+(.+)$", re.MULTILINE)


def unordered_lists(text: str) -> str:
    return _wrap_items(text, _UL_ITEM_RE, "ul")


def ordered_lists(text: str) -> str:
    return _wrap_items(text, _OL_ITEM_RE, "ol")


_ADJACENT_LIST_RE = re.compile(r"</(ul|ol)>\n+<\1>")


def merge_lists(text: str) -> str:
    return _ADJACENT_LIST_RE.sub("", text)


_LINK_RE = re.compile(r"\[([^\]\n]+)\]\(([^)\s]+)\)")


def links(text: str) -> str:
    def _sub(m: re.Match[str]) -> str:
        href = m.group(2).replace('"', "&quot;")
        return f'<a href="{href}" target="_blank" rel="noopener noreferrer">{m.group(1)}</a>'

    return _LINK_RE.sub(_sub, text)


_QUOTE_RE = re.compile(r"^&gt;[^\S\n]?(.*)$", re.MULTILINE)


def blockquotes(text: str) -> str:
    return _QUOTE_RE.sub(r"<blockquote>\1</blockquote>", text)


_BLOCK_TAG_RE = re.compile(r"^<(?:h[1-6]|ul|ol|li|pre|blockquote|hr|p)\b")


def paragraphs(text: str) -> str:
    out = []
    for line in text.split("\n"):
        stripped = line.strip()
        if stripped and not _BLOCK_TAG_RE.match(stripped):
            out.append(f"<p>{stripped}</p>")
        else:
            out.append(line)
    return "\n".join(out)


PIPELINE: Tuple[Tuple[str, Stage], ...] = (
    ("escape", escape),
    ("fenced_code", fenced_code),
    ("inline_code", inline_code),
    ("headings", headings),
    ("emphasis", emphasis),
    ("horizontal_rules", horizontal_rules),
    ("unordered_lists", unordered_lists),
    ("ordered_lists", ordered_lists),
    ("merge_lists", merge_lists),
    ("links", links),
    ("blockquotes", blockquotes),
    ("paragraphs", paragraphs),
)


def markdown_to_html(text: str) -> str:
    out = text.replace("\r\n", "\n")
    for _name, stage in PIPELINE:
        out = stage(out)
    return out.strip()
