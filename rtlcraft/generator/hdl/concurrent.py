"""
Translation of concurrent statements and instantiations.
"""

import re
from typing import Dict, List, Optional

from rtlcraft.generator.hdl import expressions as expr
from rtlcraft.generator.hdl.dialect import DialectStyle
from rtlcraft.model import Instance, OpaqueStatement

SELECT_RE = re.compile(r"^with\b.*\bselect\b", re.IGNORECASE)
ASSIGN_RE = re.compile(r"^(?P<target>.+?)\s*<=\s*(?P<rest>.+)$", re.DOTALL)
WHEN_SPLIT_RE = re.compile(r"\s+when\s+", re.IGNORECASE)
ELSE_SPLIT_RE = re.compile(r"\s+else\s+", re.IGNORECASE)
WHEN_ELSE_RE = re.compile(r"\swhen\s.*\selse\s", re.IGNORECASE)


def _split_else(text: str) -> List[str]:
    """Split ``a when c else b when d else e`` at ``else`` outside parentheses."""
    parts: List[str] = []
    start = 0
    for match in ELSE_SPLIT_RE.finditer(text):
        depth = text.count("(", 0, match.start()) - text.count(")", 0, match.start())
        if depth == 0:
            parts.append(text[start : match.start()])
            start = match.end()
    parts.append(text[start:])
    return parts


def _conditional(target: str, rest: str, style: DialectStyle, width: Optional[int]) -> Optional[str]:
    """Build ``assign t = (c) ? v1 : v2;``; None when the shape is not recognized."""
    branches = _split_else(rest)
    if len(branches) < 2:
        return None

    result = expr.rewrite_expression(branches[-1].strip(), style, width)
    for branch in reversed(branches[:-1]):
        pieces = WHEN_SPLIT_RE.split(branch, maxsplit=1)
        if len(pieces) != 2:
            return None
        value, condition = pieces
        value = expr.rewrite_expression(value.strip(), style, width)
        condition = expr.wrap_parens(expr.translate_condition(condition, style))
        result = f"{condition} ? {value} : {result}"
    return f"assign {target} = {result};"


def translate_concurrent(
    statement: str, style: DialectStyle, widths: Optional[Dict[str, int]] = None
) -> List[str]:
    """
    Translate one concurrent statement (stored without its ``;``).

    Selected assignments are not converted; they are emitted as a commented
    block for manual review.

    Returns:
        Output lines, unindented
    """
    if SELECT_RE.match(statement.strip()):
        lines = ["// TODO: convert VHDL 'with ... select' assignment:"]
        lines += [f"// {line.strip()}" for line in statement.strip().splitlines() if line.strip()]
        return lines

    text = expr.strip_casts(expr.collapse_whitespace(statement)).rstrip(";")
    match = ASSIGN_RE.match(text)
    if match is None:
        return [f"// untranslated: {text}"]

    target = match.group("target").strip()
    rest = match.group("rest").strip()
    base = expr.assignment_target(text)
    width = (widths or {}).get(base.lower()) if base else None

    if WHEN_ELSE_RE.search(f" {rest} "):
        converted = _conditional(target, rest, style, width)
        if converted is not None:
            return [converted]

    line = f"{target} = {expr.rewrite_expression(rest, style, width)};"
    return [line if line.startswith("assign ") else f"assign {line}"]


def render_instance(instance: Instance) -> List[str]:
    """Commented placeholder for an instantiation that is not elaborated."""
    lines = [f"// instance {instance.label} of {instance.unit} is not translated"]
    lines += [f"// {line.strip()}" for line in instance.text.splitlines() if line.strip()]
    return lines


def render_opaque(statement: OpaqueStatement) -> List[str]:
    """Commented placeholder for a generate, block, assertion or procedure call."""
    kind = statement.kind.value.replace("_", " ")
    subject = f"{kind} {statement.label}" if statement.label else f"unlabeled {kind}"
    lines = [f"// {subject} is not translated"]
    lines += [f"// {line.strip()}" for line in statement.text.splitlines() if line.strip()]
    return lines
