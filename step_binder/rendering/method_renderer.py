from __future__ import annotations

import logging
import re
import string
from typing import List

from ..models import GeneratedMethod, StepKeyword
from ..parsing.step_line import QUOTED_RE, get_quoted_literals, parse_step_keyword
from .literals import build_proc_assignment


logger = logging.getLogger(__name__)

CRLF = "\r\n"
INDENT = "    "

# Verbatim-string form of a capture group for any run of non-quote characters
CAPTURE_GROUP = '""([^""]*)""'

_NON_WORD_RE = re.compile(r"[^a-zA-Z0-9\s]")
_WHITESPACE_RE = re.compile(r"\s+")


def to_method_name(step_line: str) -> str:
    """Derive a C# identifier from a step line.

    Quoted text is dropped entirely, punctuation turns into spaces, and then
    all whitespace is removed. The result may be empty.
    """
    without_quoted = QUOTED_RE.sub(" ", step_line)
    without_punctuation = _NON_WORD_RE.sub(" ", without_quoted)
    return _WHITESPACE_RE.sub("", without_punctuation)


def get_parameter_names(count: int) -> List[str]:
    # a..z, then a1..z1, a2..z2, ...
    names: List[str] = []
    for i in range(count):
        letter = string.ascii_lowercase[i % 26]
        suffix = i // 26
        names.append(f"{letter}{suffix}" if suffix > 0 else letter)
    return names


def generate_binding_attribute(keyword: StepKeyword, remainder: str) -> str:
    # remainder: Message "Hello" Is Not Displayed
    # binding:   [When(@"Message ""([^""]*)"" Is Not Displayed")]
    pattern = QUOTED_RE.sub(lambda _m: CAPTURE_GROUP, remainder)
    return f'[{keyword.value}(@"{pattern}")]'


def _signature(method_name: str, parameter_names: List[str]) -> str:
    params = ", ".join(f"string {n}" for n in parameter_names)
    return f"public bool {method_name}({params})"


def generate_method(step_line: str) -> GeneratedMethod:
    """Assemble the ATF binding and C# method stub for a validated step line."""
    method_name = to_method_name(step_line)
    quoted_values = get_quoted_literals(step_line)
    parameter_names = get_parameter_names(len(quoted_values))

    parsed = parse_step_keyword(step_line)
    binding_attribute = generate_binding_attribute(parsed.keyword, parsed.remainder) if parsed.ok else None
    if binding_attribute is None:
        logger.debug("No step keyword in %r; omitting binding attribute", step_line)

    assignment = build_proc_assignment(step_line, parameter_names)

    lines: List[str] = []
    if binding_attribute:
        lines.append(binding_attribute)
    lines.extend(
        [
            _signature(method_name, parameter_names),
            "{",
            INDENT + assignment,
            "",
            INDENT + "if (CombinedSteps.OutputProc(proc))",
            INDENT + "{",
            INDENT * 2 + "return false;",
            INDENT + "}",
            "",
            INDENT + "return false;",
            "}",
        ]
    )

    return GeneratedMethod(
        method_name=method_name,
        parameter_names=parameter_names,
        binding_attribute=binding_attribute,
        assignment=assignment,
        text=CRLF.join(lines),
    )


def render_method(step_line: str) -> str:
    return generate_method(step_line).text
