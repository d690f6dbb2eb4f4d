"""Minimal ``---`` delimited frontmatter parsing.

Only flat ``key: value`` pairs are understood.  There are no nested
structures, no multi-line values and no type coercion: every value comes
back as a string.
"""

import re
from typing import Dict, Tuple

_FRONTMATTER_RE = re.compile(
    r"\A---[ \t]*\r?\n(?:(?P<block>.*?)\r?\n)?---[ \t]*(?:\r?\n|\Z)",
    re.DOTALL,
)

# One quote character is stripped from each end independently
_QUOTE_RE = re.compile(r"^[\"']|[\"']$")


def parse_frontmatter(text: str) -> Tuple[Dict[str, str], str]:
    """Split *text* into a metadata mapping and the remaining body.

    When *text* does not open with a frontmatter block the mapping is empty
    and the body is *text* unchanged.  Lines inside the block that are not
    ``key: value`` pairs are skipped rather than rejected.
    """
    match = _FRONTMATTER_RE.match(text)
    if not match:
        return {}, text

    data: Dict[str, str] = {}
    for line in (match.group("block") or "").splitlines():
        colon = line.find(":")
        if colon <= 0:
            continue
        key = line[:colon].strip()
        value = line[colon + 1 :].strip()
        if key and value:
            data[key] = _QUOTE_RE.sub("", value)

    return data, text[match.end() :]
