"""Normalization of raw page names before steps are grouped into pages."""

import re
from typing import Callable, Iterable, Optional

from docu_aggregator.domain.models import Step

PageNameSanitizer = Callable[[Optional[str]], Optional[str]]

_WHITESPACE_RE = re.compile(r'\s+')
_PATH_SEPARATOR_RE = re.compile(r'[/\\]')


def sanitize_page_name(page_name: Optional[str]) -> Optional[str]:
    """
    Default page name normalizer.

    Strips surrounding whitespace, collapses whitespace runs and replaces
    path separators, which are not allowed in page names because page
    names are used in links and file names.

    Args:
        page_name: Raw page name as written by the documentation producer.

    Returns:
        Normalized page name; None stays None.
    """
    if page_name is None:
        return None
    normalized = _WHITESPACE_RE.sub(' ', page_name.strip())
    return _PATH_SEPARATOR_RE.sub('_', normalized)


def sanitize_page_names(steps: Iterable[Step], sanitizer: PageNameSanitizer = sanitize_page_name) -> None:
    """Replace the page name of every step with its normalized form."""
    for step in steps:
        step.page_name = sanitizer(step.page_name)
