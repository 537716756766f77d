from __future__ import annotations

from typing import List

from ..parsing.step_line import iter_quoted_spans


def escape_string_literal(value: str) -> str:
    """Escape text for a regular C# string literal ("...")."""
    return value.replace("\\", "\\\\").replace('"', '\\"')


def escape_interpolated_text(value: str) -> str:
    """Escape literal text inside a C# interpolated string ($"...").

    Braces are doubled since they delimit interpolation holes. The holes
    themselves (``{a}``) are not passed through here.
    """
    return escape_string_literal(value).replace("{", "{{").replace("}", "}}")


def _parameter_name_at(parameter_names: List[str], index: int) -> str:
    if index < len(parameter_names):
        return parameter_names[index]
    return f"a{index + 1}"


def build_proc_assignment(step_line: str, parameter_names: List[str]) -> str:
    """Rebuild ``step_line`` as the ``proc`` assignment of the generated method.

    Without parameters the line is emitted as a plain literal. Otherwise every
    quoted region becomes ``\\"{name}\\"`` inside an interpolated literal, so the
    surrounding quotes of the original step survive around the dynamic value.
    """
    if not parameter_names:
        return f'string proc = "{escape_string_literal(step_line)}";'

    parts: List[str] = []
    last_index = 0
    for param_index, (start, end, _content) in enumerate(iter_quoted_spans(step_line)):
        parts.append(escape_interpolated_text(step_line[last_index:start]))
        name = _parameter_name_at(parameter_names, param_index)
        parts.append(f'\\"{{{name}}}\\"')
        last_index = end

    parts.append(escape_interpolated_text(step_line[last_index:]))
    template = "".join(parts)
    return f'string proc = $"{template}";'
