from __future__ import annotations

import re
from typing import Iterator, List, Tuple

from ..models import (
    Failure,
    KeywordResult,
    ParsedStep,
    StepError,
    StepKeyword,
    ValidatedLine,
    ValidationResult,
)


CONJUNCTION_RE = re.compile(r"^(and|or)\b", re.IGNORECASE | re.ASCII)
KEYWORD_RE = re.compile(r"^(given|when|then)\b", re.IGNORECASE | re.ASCII)
KEYWORD_SPLIT_RE = re.compile(r"^(given|when|then)\b\s*(.*)$", re.IGNORECASE | re.DOTALL | re.ASCII)

# Quotes pair greedily up to the next quote; a trailing unmatched quote is ignored
QUOTED_RE = re.compile(r'"([^"]*)"')


def validate_step_line(raw: str) -> ValidationResult:
    """Check that ``raw`` is a single step starting with Given, When or Then.

    The returned line is trimmed but keeps its original casing.
    """
    line = raw.strip()
    if not line:
        return Failure(error=StepError.EMPTY_LINE)
    if CONJUNCTION_RE.match(line):
        return Failure(error=StepError.WRONG_CONJUNCTION)
    if not KEYWORD_RE.match(line):
        return Failure(error=StepError.MISSING_KEYWORD)
    return ValidatedLine(line=line)


def parse_step_keyword(line: str) -> KeywordResult:
    """Split a step line into its title-cased keyword and trimmed remainder."""
    match = KEYWORD_SPLIT_RE.match(line.strip())
    if not match:
        return Failure(error=StepError.MISSING_KEYWORD)
    keyword = StepKeyword.from_text(match.group(1))
    return ParsedStep(keyword=keyword, remainder=match.group(2).strip())


def iter_quoted_spans(line: str) -> Iterator[Tuple[int, int, str]]:
    """Yield ``(start, end, content)`` for each quoted region, left to right.

    ``start``/``end`` cover the delimiting quotes; ``content`` excludes them.
    """
    for m in QUOTED_RE.finditer(line):
        yield m.start(), m.end(), m.group(1)


def get_quoted_literals(line: str) -> List[str]:
    return [content for _, _, content in iter_quoted_spans(line)]
