"""
Expression-level rewrites shared by the statement and concurrent translators.

All functions work on a single line of VHDL text and return target text.
The rewrites are textual: they do not parse expressions, so the order in
which ``rewrite_expression`` applies them matters.
"""

import re
from typing import List, Optional

from rtlcraft.generator.hdl.dialect import DialectStyle

DEFAULT_FILL_WIDTH = 8

CAST_FUNCTIONS = (
    "std_logic_vector",
    "std_ulogic_vector",
    "unsigned",
    "signed",
    "to_unsigned",
    "to_signed",
    "to_integer",
    "resize",
)

COMMENT_RE = re.compile(r"--.*$")
HEX_LITERAL_RE = re.compile(r'\b[xX]"([0-9A-Fa-f_]+)"')
OCTAL_LITERAL_RE = re.compile(r'\b[oO]"([0-7_]+)"')
BINARY_LITERAL_RE = re.compile(r'(?<!\w)[bB]?"([01_]+)"')
OTHERS_RE = re.compile(r"\(\s*others\s*=>\s*(?:'([01])'|1'b([01]))\s*\)", re.IGNORECASE)
BIT_EQUALITY_RE = re.compile(r"\s*(?<![<>/:=!])=\s*'([01])'")
BIT_LITERAL_RE = re.compile(r"'([01xXzZ])'")
NOT_EQUAL_RE = re.compile(r"/=")
VARIABLE_ASSIGN_RE = re.compile(r":=")
STANDALONE_EQ_RE = re.compile(r"(?<![<>=!/:])=(?![=>])")
CAST_RE = re.compile(r"\b(" + "|".join(CAST_FUNCTIONS) + r")\s*\(", re.IGNORECASE)
TARGET_RE = re.compile(r"^\s*([A-Za-z_][A-Za-z0-9_]*)[^;]*?(?:<=|:=)")
SLICE_RE = re.compile(
    r"\b([A-Za-z_]\w*)\s*\(\s*([^(),]+?)\s+(?:downto|to)\s+([^(),]+?)\s*\)", re.IGNORECASE
)
ASSIGNMENT_SPLIT_RE = re.compile(
    r"^(?P<lhs>[^;]*?(?:<=|:=)\s*)(?P<rhs>.*?)(?P<end>\s*;?\s*)$", re.DOTALL
)
COMPARISON_RE = re.compile(r"/=|[<>]|(?<![:=])=(?!>)")
CONDITIONAL_RE = re.compile(r"\b(?:when|else|select)\b", re.IGNORECASE)

# Keywords that can precede a parenthesized range without being a slice
NON_SLICE_PREFIXES = frozenset(
    {"if", "elsif", "when", "while", "for", "case", "range", "and", "or", "not"}
)

LOGICAL_OPERATORS = (
    (re.compile(r"\bnot\s+", re.IGNORECASE), "~"),
    (re.compile(r"\bnot\b", re.IGNORECASE), "~"),
    (re.compile(r"\band\b", re.IGNORECASE), "&"),
    (re.compile(r"\bxor\b", re.IGNORECASE), "^"),
    (re.compile(r"\bor\b", re.IGNORECASE), "|"),
)

EDGE_CALL = r"(?:rising_edge|falling_edge)\s*\(\s*[A-Za-z_][A-Za-z0-9_]*\s*\)"
EVENT_TEST = r"[A-Za-z_][A-Za-z0-9_]*'event\s+and\s+[A-Za-z_][A-Za-z0-9_]*\s*=\s*'[01]'"
EDGE_TERM = rf"(?:{EDGE_CALL}|{EVENT_TEST})"
EDGE_GUARD_RE = re.compile(rf"^\(?\s*{EDGE_TERM}\s*\)?$", re.IGNORECASE)
EDGE_ANY_RE = re.compile(EDGE_TERM, re.IGNORECASE)
EDGE_AND_RE = re.compile(rf"{EDGE_TERM}\s+and\s+", re.IGNORECASE)
AND_EDGE_RE = re.compile(rf"\s+and\s+{EDGE_TERM}", re.IGNORECASE)


def strip_comment(line: str) -> str:
    """Remove a trailing ``--`` comment."""
    return COMMENT_RE.sub("", line)


def _bit_count(digits: str, bits_per_digit: int) -> int:
    return len(digits.replace("_", "")) * bits_per_digit


def rewrite_hex(text: str) -> str:
    """``x"FF"`` becomes ``8'hFF``; each digit is four bits wide."""
    return HEX_LITERAL_RE.sub(lambda m: f"{_bit_count(m.group(1), 4)}'h{m.group(1)}", text)


def rewrite_octal(text: str) -> str:
    """``o"17"`` becomes ``6'o17``; each digit is three bits wide."""
    return OCTAL_LITERAL_RE.sub(lambda m: f"{_bit_count(m.group(1), 3)}'o{m.group(1)}", text)


def rewrite_binary(text: str) -> str:
    """``"0101"`` and ``b"0101"`` become ``4'b0101``."""
    return BINARY_LITERAL_RE.sub(lambda m: f"{_bit_count(m.group(1), 1)}'b{m.group(1)}", text)


def rewrite_others(text: str, style: DialectStyle, width: Optional[int] = None) -> str:
    """Replace ``(others => '0')`` aggregates with a fill literal of the dialect."""

    def fill(match: re.Match) -> str:
        bit = match.group(1) or match.group(2)
        return style.fill_literal(bit, width or DEFAULT_FILL_WIDTH)

    return OTHERS_RE.sub(fill, text)


def rewrite_bit_literals(text: str) -> str:
    """Rewrite ``= '1'`` comparisons and single-bit character literals."""
    text = BIT_EQUALITY_RE.sub(lambda m: f" == 1'b{m.group(1)}", text)
    return BIT_LITERAL_RE.sub(lambda m: f"1'b{m.group(1).lower()}", text)


def rewrite_operators(text: str) -> str:
    """Map VHDL logical keywords onto bitwise operators."""
    for pattern, replacement in LOGICAL_OPERATORS:
        text = pattern.sub(replacement, text)
    return text


def find_closing_paren(text: str, open_index: int) -> Optional[int]:
    """Index of the ``)`` matching the ``(`` at ``open_index``, if on this line."""
    depth = 0
    for index in range(open_index, len(text)):
        if text[index] == "(":
            depth += 1
        elif text[index] == ")":
            depth -= 1
            if depth == 0:
                return index
    return None


def split_top_level(text: str, separator: str = ",") -> List[str]:
    """Split on ``separator`` outside of parentheses."""
    parts: List[str] = []
    depth = 0
    current = ""
    for char in text:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        if char == separator and depth == 0:
            parts.append(current)
            current = ""
        else:
            current += char
    parts.append(current)
    return parts


def _top_level(text: str) -> str:
    """``text`` with everything inside parentheses blanked out."""
    depth = 0
    chars = []
    for char in text:
        if char == ")":
            depth -= 1
        chars.append(char if depth <= 0 else " ")
        if char == "(":
            depth += 1
    return "".join(chars)


def rewrite_concatenation(text: str) -> str:
    """
    ``q <= a & b;`` becomes ``q <= {a, b};``.

    Only a whole right-hand side (or a whole value expression) is rewritten.
    Text with a comparison or a ``when``/``else`` at top level is left alone,
    since its ``&`` operands cannot be told apart from other terms.
    """
    match = ASSIGNMENT_SPLIT_RE.match(text)
    if match:
        lhs, rhs, end = match.group("lhs"), match.group("rhs"), match.group("end")
    else:
        lhs, rhs, end = "", text, ""

    top = _top_level(rhs)
    if "&" not in top or CONDITIONAL_RE.search(top) or COMPARISON_RE.search(top):
        return text
    parts = [part.strip() for part in split_top_level(rhs, "&")]
    return f"{lhs}{{{', '.join(parts)}}}{end}"


def rewrite_slices(text: str) -> str:
    """``a(7 downto 4)`` becomes ``a[7:4]``."""

    def to_brackets(match: re.Match) -> str:
        if match.group(1).lower() in NON_SLICE_PREFIXES:
            return match.group(0)
        return f"{match.group(1)}[{match.group(2).strip()}:{match.group(3).strip()}]"

    return SLICE_RE.sub(to_brackets, text)


def rebalance_parens(text: str) -> str:
    """Drop the rightmost ``)`` until the line has no surplus closers."""
    while text.count(")") > text.count("(") and ")" in text:
        index = text.rfind(")")
        text = text[:index] + text[index + 1 :]
    return text


def strip_casts(text: str) -> str:
    """
    Remove type conversion calls.

    A call whose closing parenthesis is on the same line is replaced by its
    first argument, dropping width arguments. Otherwise only the call token
    is deleted and the line is rebalanced.
    """
    dangling = False
    search_from = 0
    while True:
        match = CAST_RE.search(text, search_from)
        if match is None:
            break
        open_index = match.end() - 1
        close_index = find_closing_paren(text, open_index)
        if close_index is None:
            text = text[: match.start()] + text[match.end() :]
            dangling = True
            search_from = match.start()
            continue
        first_arg = split_top_level(text[open_index + 1 : close_index])[0].strip()
        text = text[: match.start()] + first_arg + text[close_index + 1 :]
        search_from = match.start()
    return rebalance_parens(text) if dangling else text


def rewrite_expression(text: str, style: DialectStyle, width: Optional[int] = None) -> str:
    """
    Apply every literal and operator rewrite to statement text.

    Args:
        text: VHDL statement or expression text
        style: Target dialect style, used for ``others`` aggregates
        width: Declared width of the assignment target, if known

    Returns:
        Rewritten text
    """
    text = rewrite_concatenation(text)
    text = rewrite_slices(text)
    text = rewrite_hex(text)
    text = rewrite_octal(text)
    text = rewrite_binary(text)
    text = rewrite_others(text, style, width)
    text = rewrite_bit_literals(text)
    text = NOT_EQUAL_RE.sub("!=", text)
    text = VARIABLE_ASSIGN_RE.sub("=", text)
    text = rewrite_operators(text)
    return strip_casts(text)


def translate_condition(text: str, style: DialectStyle) -> str:
    """Rewrite a condition, where a single ``=`` is a comparison."""
    text = rewrite_expression(text, style)
    return STANDALONE_EQ_RE.sub("==", text)


def is_wrapped(text: str) -> bool:
    """Check if the whole text is enclosed by one pair of parentheses."""
    text = text.strip()
    return text.startswith("(") and find_closing_paren(text, 0) == len(text) - 1


def wrap_parens(text: str) -> str:
    text = text.strip()
    return text if is_wrapped(text) else f"({text})"


def is_edge_guard(condition: str) -> bool:
    """Check if a condition is nothing but an edge detection."""
    return EDGE_GUARD_RE.match(condition.strip()) is not None


def contains_edge(condition: str) -> bool:
    return EDGE_ANY_RE.search(condition) is not None


def remove_edge_terms(condition: str) -> str:
    """Drop edge detections that are and-ed with other terms."""
    condition = EDGE_AND_RE.sub("", condition)
    return AND_EDGE_RE.sub("", condition)


def assignment_target(text: str) -> Optional[str]:
    """Base identifier on the left of ``<=`` or ``:=``, e.g. ``q`` for ``q(3) <= d``."""
    match = TARGET_RE.match(text)
    return match.group(1) if match else None


def collapse_whitespace(text: str) -> str:
    return " ".join(text.split())
