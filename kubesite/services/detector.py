"""Recognise the SPA app shell when it is served in place of a pre-rendered page.

Static hosts are usually configured to rewrite unknown paths to the app's
``index.html``.  A request for ``/<category>/<slug>/index.html`` that has no
snapshot then answers ``200`` with the bare shell, which must not be mistaken
for article content.
"""

import re

# Mount points and bootstrap markers present in an un-rendered shell
_SHELL_PATTERN = re.compile(
    r'<div\s[^>]*\bid=["\']root["\']'
    r'|<div\s[^>]*\bid=["\']app["\']'
    r'|<div\s[^>]*\bid=["\']__next["\']'
    r"|__NEXT_DATA__"
    r"|data-reactroot",
    re.IGNORECASE,
)

# Every pre-rendered article wraps its body in this element
_ARTICLE_PATTERN = re.compile(
    r'<article\s[^>]*\bclass=["\'][^"\']*\bmarkdown-content\b',
    re.IGNORECASE,
)


def has_article(html: str) -> bool:
    return bool(_ARTICLE_PATTERN.search(html))


def is_app_shell(html: str) -> bool:
    """Return True when *html* is the client-side shell rather than a snapshot.

    A page counts as the shell only when it carries a mount-point marker
    *and* holds no article body.  Empty responses are treated as the shell.
    """
    if not html.strip():
        return True
    if has_article(html):
        return False
    return bool(_SHELL_PATTERN.search(html))
