from __future__ import annotations

import logging
import re
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Callable, List, Optional, Pattern, Sequence, Union

from .config import AppConfig
from .models import BatchEntry, ConversionResult, Failure, StepError
from .parsing.step_line import validate_step_line
from .rendering.method_renderer import generate_method


logger = logging.getLogger(__name__)


class LineLookupError(ValueError):
    """Requested line does not exist in the source file."""


def convert_line(raw: str) -> ConversionResult:
    """Validate one step line and generate its method, or return the failure."""
    validated = validate_step_line(raw)
    if not validated.ok:
        logger.debug("Rejected %r: %s", raw, validated.error.value)
        return validated
    return generate_method(validated.line)


def resolve_single_line(text: str) -> Union[str, Failure]:
    """Accept text only if it spans a single line.

    A single trailing line break (as produced by ``echo`` or a copied line) is
    tolerated and stripped.
    """
    if text.endswith("\r\n"):
        text = text[:-2]
    elif text.endswith("\n") or text.endswith("\r"):
        text = text[:-1]
    if "\n" in text or "\r" in text:
        return Failure(error=StepError.MULTI_LINE)
    return text


def read_line(path: Path, line_number: int, encoding: str = "utf-8") -> str:
    """Return line ``line_number`` (1-based) of ``path`` without its line break."""
    lines = path.read_text(encoding=encoding).splitlines()
    if line_number < 1 or line_number > len(lines):
        raise LineLookupError(f"Line {line_number} is out of range for {path} ({len(lines)} lines)")
    return lines[line_number - 1]


def step_prefix_pattern(config: AppConfig) -> Pattern[str]:
    """Match a configured step word at the start of a line, on a word boundary.

    Uses the same boundary rule as step validation, so ``Given: x`` is selected.
    """
    if not config.step_prefixes:
        return re.compile(r"(?!)")
    alternatives = "|".join(re.escape(p) for p in config.step_prefixes)
    return re.compile(rf"^({alternatives})\b", re.IGNORECASE | re.ASCII)


def is_step_line(line: str, config: AppConfig) -> bool:
    return step_prefix_pattern(config).match(line.strip()) is not None


def select_step_lines(lines: Sequence[str], config: AppConfig, skip_conjunctions: Optional[bool] = None) -> List[tuple[int, str]]:
    """Pick ``(line_number, text)`` pairs of a feature file worth converting."""
    if skip_conjunctions is None:
        skip_conjunctions = config.skip_conjunctions
    prefix_re = step_prefix_pattern(config)
    selected: List[tuple[int, str]] = []
    for number, line in enumerate(lines, start=1):
        match = prefix_re.match(line.strip())
        if not match:
            continue
        if skip_conjunctions and match.group(1).lower() not in {"given", "when", "then"}:
            logger.debug("Skipping continuation step on line %d", number)
            continue
        selected.append((number, line))
    return selected


def convert_feature_lines(
    lines: Sequence[str],
    config: AppConfig,
    skip_conjunctions: Optional[bool] = None,
    progress_callback: Optional[Callable[[int, int, BatchEntry], None]] = None,
) -> List[BatchEntry]:
    """Convert every step line of a feature file, keeping file order."""
    selected = select_step_lines(lines, config, skip_conjunctions=skip_conjunctions)

    def do_convert(idx: int, number: int, source: str) -> tuple[int, BatchEntry]:
        return idx, BatchEntry(line_number=number, source=source, result=convert_line(source))

    total = len(selected)
    entries: List[BatchEntry] = [None] * total  # type: ignore
    completed = 0

    with ThreadPoolExecutor(max_workers=max(1, config.batch_concurrency)) as executor:
        futures = [executor.submit(do_convert, idx, number, source) for idx, (number, source) in enumerate(selected)]
        for future in as_completed(futures):
            idx, entry = future.result()
            entries[idx] = entry
            completed += 1
            if progress_callback:
                progress_callback(completed, total, entry)

    logger.debug("Converted %d step lines (%d failed)", total, sum(1 for e in entries if not e.ok))
    return entries


def join_methods(entries: Sequence[BatchEntry]) -> str:
    texts = [e.result.text for e in entries if e.ok]
    return "\r\n\r\n".join(texts)
