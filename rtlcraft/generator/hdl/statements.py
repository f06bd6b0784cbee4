"""
Translation of VHDL process bodies into procedural block statements.

The body is split into logical lines and folded through ``translate_line``.
Every step takes an immutable ``BodyState`` and returns the next state
together with the emitted ``(level, text)`` lines, so a body can be
translated line by line in tests and no counters live at module level.
"""

import re
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Tuple

from rtlcraft.generator.hdl import expressions as expr
from rtlcraft.generator.hdl.dialect import DialectStyle

Line = Tuple[int, str]

IF_RE = re.compile(r"^if\b\s*(?P<cond>.*?)\s*(?:\bthen)?$", re.IGNORECASE)
ELSIF_RE = re.compile(r"^elsif\b\s*(?P<cond>.*?)\s*(?:\bthen)?$", re.IGNORECASE)
ELSE_RE = re.compile(r"^else$", re.IGNORECASE)
END_IF_RE = re.compile(r"^end\s+if\b", re.IGNORECASE)
CASE_RE = re.compile(r"^case\b\s*(?P<expr>.*?)\s*\bis$", re.IGNORECASE)
WHEN_RE = re.compile(r"^when\s+(?P<choices>.+?)\s*=>\s*(?P<rest>.*)$", re.IGNORECASE)
END_CASE_RE = re.compile(r"^end\s+case\b", re.IGNORECASE)
NULL_RE = re.compile(r"^null\s*;?$", re.IGNORECASE)
UNSUPPORTED_RE = re.compile(
    r"^(?:for|while|loop|wait|assert|report|exit|next|end\s+loop)\b", re.IGNORECASE
)
BEGIN_RE = re.compile(r"\bbegin\b")
CASE_HEADER_RE = re.compile(r"^(?:unique\s+)?case\s*\(")
CASE_LABEL_RE = re.compile(r":$")
THEN_SPLIT_RE = re.compile(r"^((?:if|elsif)\b.*?\bthen)\s+(\S.*)$", re.IGNORECASE)
ELSE_SPLIT_RE = re.compile(r"^(else)\s+(\S.*)$", re.IGNORECASE)
COMPLETE_RE = re.compile(r"(?:;|=>|\b(?:then|else|is|begin|loop))$", re.IGNORECASE)


@dataclass(frozen=True)
class CaseFrame:
    """
    One open ``case``.

    A branch header is held in ``pending_label`` until the branch's first
    statement arrives; ``branch_open`` is set once ``<label>: begin`` has
    been emitted.
    """

    pending_label: Optional[str] = None
    branch_open: bool = False


@dataclass(frozen=True)
class BodyState:
    """State threaded through the body fold."""

    indent_level: int = 0
    cases: Tuple[CaseFrame, ...] = ()
    # One entry per open ``if``; True when its edge guard was dropped
    skipped_ifs: Tuple[bool, ...] = ()

    @property
    def in_case(self) -> bool:
        return bool(self.cases)

    @property
    def case_branch_has_stmt(self) -> bool:
        return self.in_case and self.cases[-1].branch_open


def is_control_flow(text: str) -> bool:
    """Check if a translated line is control flow and takes no ``;``."""
    lowered = text.lower()
    return (
        BEGIN_RE.search(lowered) is not None
        or lowered.startswith("end")
        or lowered == "else"
        or CASE_LABEL_RE.search(lowered) is not None
        or CASE_HEADER_RE.match(lowered) is not None
    )


def terminate(text: str) -> str:
    if is_control_flow(text) or text.endswith(";"):
        return text
    return f"{text};"


def _split_statements(line: str) -> List[str]:
    """Split a line holding several statements, keeping their ``;``."""
    pieces: List[str] = []
    depth = 0
    in_string = False
    current = ""
    for char in line:
        current += char
        if char == '"':
            in_string = not in_string
        elif not in_string and char == "(":
            depth += 1
        elif not in_string and char == ")":
            depth -= 1
        elif not in_string and depth == 0 and char == ";":
            pieces.append(current.strip())
            current = ""
    if current.strip():
        pieces.append(current.strip())
    return pieces


def _split_inline(line: str) -> List[str]:
    """Move statements that follow ``then``, ``else`` or ``=>`` onto their own lines."""
    for pattern in (THEN_SPLIT_RE, ELSE_SPLIT_RE):
        match = pattern.match(line)
        if match:
            return [match.group(1)] + _split_inline(match.group(2))
    match = WHEN_RE.match(line)
    if match and match.group("rest"):
        header = line[: match.start("rest")].rstrip()
        return [header] + _split_inline(match.group("rest"))
    return [line]


def logical_lines(body: str) -> List[str]:
    """
    Turn raw body text into one construct per line.

    Comments and blank lines are dropped, statements spanning several
    lines are joined, and several statements on one line are split.
    """
    joined: List[str] = []
    pending = ""
    for raw in body.splitlines():
        text = expr.strip_comment(raw).strip()
        if not text:
            continue
        pending = f"{pending} {text}".strip()
        if COMPLETE_RE.search(pending):
            joined.append(pending)
            pending = ""
    if pending:
        joined.append(pending)

    lines: List[str] = []
    for text in joined:
        for statement in _split_statements(text):
            lines.extend(_split_inline(statement))
    return lines


def _emit(state: BodyState, out: List[Line], text: str) -> BodyState:
    level = state.indent_level
    if text.lower().startswith("end"):
        level = max(0, level - 1)
    out.append((level, text))
    if BEGIN_RE.search(text) or CASE_HEADER_RE.match(text):
        level += 1
    return replace(state, indent_level=level)


def _with_top_frame(state: BodyState, frame: CaseFrame) -> BodyState:
    return replace(state, cases=state.cases[:-1] + (frame,))


def _close_branch(state: BodyState, out: List[Line]) -> BodyState:
    frame = state.cases[-1]
    if frame.branch_open:
        state = _emit(state, out, "end")
    elif frame.pending_label is not None:
        state = _emit(state, out, f"{frame.pending_label}: ;")
    return _with_top_frame(state, CaseFrame())


def _open_branch(state: BodyState, out: List[Line]) -> BodyState:
    if not state.in_case or state.cases[-1].pending_label is None:
        return state
    state = _emit(state, out, f"{state.cases[-1].pending_label}: begin")
    return _with_top_frame(state, CaseFrame(branch_open=True))


def translate_choices(choices: str, style: DialectStyle) -> str:
    """``when "01" | "10" =>`` choices as a case item label."""
    labels = []
    for choice in expr.split_top_level(choices, "|"):
        choice = choice.strip()
        if choice.lower() == "others":
            labels.append("default")
        else:
            labels.append(expr.rewrite_expression(choice, style))
    return ", ".join(labels)


def translate_line(
    state: BodyState,
    line: str,
    style: DialectStyle,
    widths: Optional[Dict[str, int]] = None,
) -> Tuple[BodyState, List[Line]]:
    """
    Translate one logical line.

    Args:
        state: State before the line
        line: Logical VHDL line, as produced by ``logical_lines``
        style: Target dialect style
        widths: Declared widths by lower-case name, for ``others`` fills

    Returns:
        Tuple of (next state, emitted lines)
    """
    out: List[Line] = []
    if NULL_RE.match(line):
        return state, out

    when = WHEN_RE.match(line)
    if when and state.in_case:
        state = _close_branch(state, out)
        label = translate_choices(when.group("choices"), style)
        return _with_top_frame(state, CaseFrame(pending_label=label)), out

    if END_CASE_RE.match(line) and state.in_case:
        state = _close_branch(state, out)
        state = replace(state, cases=state.cases[:-1])
        return _emit(state, out, "endcase"), out

    state = _open_branch(state, out)

    case = CASE_RE.match(line)
    if case:
        selector = expr.wrap_parens(expr.rewrite_expression(case.group("expr"), style))
        state = _emit(state, out, f"{style.case_keyword} {selector}")
        return replace(state, cases=state.cases + (CaseFrame(),)), out

    if ELSIF_RE.match(line):
        if state.skipped_ifs and state.skipped_ifs[-1]:
            return state, out
        condition = ELSIF_RE.match(line).group("cond")
        if expr.is_edge_guard(condition):
            return _emit(state, out, "end else begin"), out
        condition = expr.remove_edge_terms(condition)
        condition = expr.wrap_parens(expr.translate_condition(condition, style))
        return _emit(state, out, f"end else if {condition} begin"), out

    if IF_RE.match(line):
        condition = IF_RE.match(line).group("cond")
        if expr.is_edge_guard(condition):
            return replace(state, skipped_ifs=state.skipped_ifs + (True,)), out
        condition = expr.remove_edge_terms(condition)
        condition = expr.wrap_parens(expr.translate_condition(condition, style))
        state = replace(state, skipped_ifs=state.skipped_ifs + (False,))
        return _emit(state, out, f"if {condition} begin"), out

    if ELSE_RE.match(line):
        if state.skipped_ifs and state.skipped_ifs[-1]:
            return state, out
        return _emit(state, out, "end else begin"), out

    if END_IF_RE.match(line):
        skipped = state.skipped_ifs[-1] if state.skipped_ifs else False
        state = replace(state, skipped_ifs=state.skipped_ifs[:-1])
        if skipped:
            return state, out
        return _emit(state, out, "end"), out

    if UNSUPPORTED_RE.match(line):
        return _emit(state, out, f"// untranslated: {line}"), out

    target = expr.assignment_target(line)
    width = (widths or {}).get(target.lower()) if target else None
    return _emit(state, out, terminate(expr.rewrite_expression(line, style, width))), out


def translate_body(
    body: str, style: DialectStyle, widths: Optional[Dict[str, int]] = None
) -> List[Line]:
    """Fold every logical line of ``body`` into ``(level, text)`` lines."""
    state = BodyState()
    emitted: List[Line] = []
    for line in logical_lines(body):
        state, out = translate_line(state, line, style, widths)
        emitted.extend(out)
    return emitted


def render_body(lines: List[Line], indent_unit: str) -> List[str]:
    """Indent translated lines for a block nested one level inside a module."""
    return [f"{indent_unit * (2 + level)}{text}" for level, text in lines]
