"""
VHDL grammar built with pyparsing.

The grammar covers the subset the lifter understands (context clauses,
entities, architectures, processes, concurrent assignments and
instantiations) and turns it into a concrete syntax tree whose node kinds
follow the VHDL LRM production names. Generate and block regions,
concurrent assertions, procedure calls and subprogram bodies are valid
VHDL outside that subset; they become opaque nodes that keep their text.
Design units the grammar cannot match are kept as ``ERROR`` nodes instead
of aborting the parse.
"""

import logging
import re

from pyparsing import (
    CaselessKeyword,
    CharsNotIn,
    Empty,
    Forward,
    Literal,
    OneOrMore,
)
from pyparsing import Optional as Opt
from pyparsing import (
    ParseBaseException,
    ParserElement,
    Regex,
    SkipTo,
    Suppress,
    Word,
    ZeroOrMore,
    alphanums,
    alphas,
    nested_expr,
)

from rtlcraft.parser.errors import GrammarError
from rtlcraft.parser.hdl.tree import ERROR_KIND, Node, SyntaxTree, blank_comments

logger = logging.getLogger(__name__)

# Enable packrat parsing for better performance
ParserElement.set_default_whitespace_chars(" \t\n\r")
ParserElement.enable_packrat()

RESERVED_WORDS = frozenset(
    """
    abs access after alias all and architecture array assert attribute begin
    block body buffer bus case component configuration constant disconnect
    downto else elsif end entity exit file for function generate generic group
    guarded if impure in inertial inout is label library linkage literal loop
    map mod nand new next nor not null of on open or others out package port
    postponed procedure process pure range record register reject rem report
    return rol ror select severity signal shared sla sll sra srl subtype then
    to transport type unaffected units until use variable wait when while with
    xnor xor
    """.split()
)


def _make_node(kind: str, source: str, tokens) -> Node:
    start, end = tokens[0], tokens[-1]
    # Failed optional elements leave loc past the whitespace they skipped
    while end > start and source[end - 1].isspace():
        end -= 1
    children = [tok for tok in tokens[1:-1] if isinstance(tok, Node)]
    return Node(kind, start, end, children)


def _node(kind: str, expr: ParserElement) -> ParserElement:
    """Wrap ``expr`` so that a match becomes a ``Node`` spanning the matched text.

    Same location-marker technique as ``original_text_for``. The end marker
    skips no whitespace, and trailing blanks left behind by an unmatched
    optional element are trimmed off the span.
    """
    start_marker = Empty().set_parse_action(lambda s, loc, toks: loc)
    end_marker = Empty().set_parse_action(lambda s, loc, toks: loc)
    end_marker.callPreparse = False
    wrapped = start_marker + expr + end_marker
    wrapped.set_parse_action(lambda s, loc, toks: _make_node(kind, s, toks))
    return wrapped.set_name(kind)


class VhdlGrammar:
    """Grammar for VHDL design files producing a ``SyntaxTree``."""

    def __init__(self):
        """Initialize the grammar definitions."""
        kw = {word: CaselessKeyword(word) for word in RESERVED_WORDS}
        self.keywords = kw

        semi = Suppress(";")
        colon = Suppress(":")
        comma = Suppress(",")
        lpar, rpar = Suppress("("), Suppress(")")

        # Basic building blocks
        name = Word(alphas + "_", alphanums + "_").add_condition(
            lambda toks: toks[0].lower() not in RESERVED_WORDS
        )
        self.identifier = _node("identifier", name)
        simple_name = _node("simple_name", name)
        identifier_list = _node(
            "identifier_list", self.identifier + ZeroOrMore(comma + self.identifier)
        )
        label = _node("label", name) + colon

        # Bound expressions inside ranges keep enough structure to spot literals
        integer_decimal = _node("integer_decimal", Regex(r"\d[\d_]*(?![\w.#])"))
        based_literal = Regex(r"\d+#[0-9A-Fa-f_]+#")
        character_literal = Regex(r"'.'")
        string_literal = Regex(r'[bBoOxX]?"[^"\n]*"')
        attribute_suffix = Regex(r"'(?!.')[A-Za-z_]\w*")

        simple_expression = Forward()
        call_args = lpar + simple_expression + ZeroOrMore(comma + simple_expression) + rpar
        name_expr = (
            simple_name + ZeroOrMore(Suppress(".") + name) + Opt(call_args) + Opt(attribute_suffix)
        )
        primary = (
            based_literal
            | integer_decimal
            | character_literal
            | string_literal
            | name_expr
            | (lpar + simple_expression + rpar)
        )
        operator = Regex(r"\*\*|[-+*/&]") | kw["mod"] | kw["rem"]
        simple_expression <<= _node(
            "simple_expression",
            Opt(Regex(r"[-+]")) + primary + ZeroOrMore(operator + primary),
        )

        # Opaque expressions (default values) only need balanced parentheses
        self.expression = _node("expression", OneOrMore(nested_expr() | CharsNotIn(";()")))
        default_value = Suppress(":=") + self.expression

        # Subtype indications and ranges
        descending_range = _node(
            "descending_range", simple_expression + kw["downto"] + simple_expression
        )
        ascending_range = _node("ascending_range", simple_expression + kw["to"] + simple_expression)
        range_spec = descending_range | ascending_range
        discrete_subtype = _node(
            "discrete_subtype", simple_name + Opt(kw["range"] + (Literal("<>") | range_spec))
        )
        discrete_range = range_spec | discrete_subtype
        index_constraint = _node(
            "index_constraint", lpar + discrete_range + ZeroOrMore(comma + discrete_range) + rpar
        )
        array_constraint = _node("array_constraint", index_constraint)
        range_constraint = _node("range_constraint", kw["range"] + range_spec)
        type_mark = _node("type_mark", simple_name + ZeroOrMore(Suppress(".") + simple_name))
        self.subtype_indication = _node(
            "subtype_indication", type_mark + Opt(array_constraint | range_constraint)
        )

        # Entity header
        mode = _node(
            "mode", kw["inout"] | kw["in"] | kw["out"] | kw["buffer"] | kw["linkage"]
        )
        interface_constant_declaration = _node(
            "interface_constant_declaration",
            Opt(kw["constant"])
            + identifier_list
            + colon
            + Opt(kw["in"])
            + self.subtype_indication
            + Opt(default_value),
        )
        generic_interface_list = _node(
            "generic_interface_list",
            interface_constant_declaration + ZeroOrMore(semi + interface_constant_declaration),
        )
        generic_clause = _node(
            "generic_clause", kw["generic"] + lpar + generic_interface_list + rpar + semi
        )
        signal_interface_declaration = _node(
            "signal_interface_declaration",
            Opt(kw["signal"])
            + identifier_list
            + colon
            + Opt(mode)
            + self.subtype_indication
            + Opt(kw["bus"])
            + Opt(default_value),
        )
        port_clause = _node(
            "port_clause",
            kw["port"]
            + lpar
            + Opt(signal_interface_declaration + ZeroOrMore(semi + signal_interface_declaration))
            + rpar
            + semi,
        )
        entity_header = _node("entity_header", Opt(generic_clause) + Opt(port_clause))

        # Declarative items
        use_clause = _node("use_clause", kw["use"] + Regex(r"[^;]+") + semi)
        signal_declaration = _node(
            "signal_declaration",
            kw["signal"]
            + identifier_list
            + colon
            + self.subtype_indication
            + Opt(kw["register"] | kw["bus"])
            + Opt(default_value)
            + semi,
        )
        constant_declaration = _node(
            "constant_declaration",
            kw["constant"]
            + identifier_list
            + colon
            + self.subtype_indication
            + Opt(default_value)
            + semi,
        )
        enumeration_literal = _node("enumeration_literal", name | character_literal)
        enumeration_type_definition = _node(
            "enumeration_type_definition",
            lpar + enumeration_literal + ZeroOrMore(comma + enumeration_literal) + rpar,
        )
        record_end = kw["end"] + kw["record"]
        record_type_definition = _node(
            "record_type_definition", kw["record"] + SkipTo(record_end) + record_end + Opt(name)
        )
        type_definition = _node("type_definition", Regex(r"[^;]+"))
        type_declaration = _node(
            "type_declaration",
            kw["type"]
            + self.identifier
            + kw["is"]
            + (enumeration_type_definition | record_type_definition | type_definition)
            + semi,
        )
        subtype_declaration = _node(
            "subtype_declaration",
            kw["subtype"] + self.identifier + kw["is"] + Regex(r"[^;]+") + semi,
        )
        component_declaration = _node(
            "component_declaration",
            kw["component"]
            + self.identifier
            + Opt(kw["is"])
            + Opt(generic_clause)
            + Opt(port_clause)
            + kw["end"]
            + kw["component"]
            + Opt(name)
            + semi,
        )
        attribute_declaration = _node(
            "attribute_declaration", kw["attribute"] + Regex(r"[^;]+") + semi
        )
        variable_declaration = _node(
            "variable_declaration",
            Opt(kw["shared"])
            + kw["variable"]
            + (
                (identifier_list + colon + self.subtype_indication + Opt(default_value) + semi)
                | (Regex(r"[^;]+") + semi)
            ),
        )
        alias_declaration = _node("alias_declaration", kw["alias"] + Regex(r"[^;]+") + semi)

        # Subprograms are recognized as opaque items
        function_specification = (
            Opt(kw["pure"] | kw["impure"])
            + kw["function"]
            + (name | string_literal)
            + Opt(nested_expr())
            + kw["return"]
            + name
            + ZeroOrMore(Literal(".") + name)
        )
        procedure_specification = kw["procedure"] + name + Opt(nested_expr())
        subprogram_declaration = _node(
            "subprogram_declaration", (function_specification | procedure_specification) + semi
        )
        subprogram_body = _node(
            "subprogram_body",
            Regex(
                r"(?:(?:pure|impure)\s+)?(?:function|procedure)\s+(\w+|\"[^\"]*\")\s*"
                r"(?:\((?:[^()]|\([^()]*\))*\)\s*)?(?:return\s+[\w.]+\s+)?is\b"
                r"[\s\S]*?\bbegin\b[\s\S]*?"
                r"\bend\b\s*(?:(?:function|procedure)\b)?\s*(?:\1(?!\w))?\s*;",
                flags=re.IGNORECASE,
            ),
        )
        subprogram_item = subprogram_declaration | subprogram_body

        block_declarative_item = (
            signal_declaration
            | constant_declaration
            | type_declaration
            | subtype_declaration
            | component_declaration
            | attribute_declaration
            | variable_declaration
            | alias_declaration
            | subprogram_item
            | use_clause
        )
        process_declarative_item = (
            variable_declaration
            | constant_declaration
            | type_declaration
            | subtype_declaration
            | attribute_declaration
            | alias_declaration
            | subprogram_item
            | use_clause
            | _node("declaration", Regex(r"(?!begin\b)[^;]+;", flags=re.IGNORECASE))
        )

        # Processes: the statement part is kept as raw text
        sensitivity_entry = simple_name | _node("simple_name", kw["all"])
        sensitivity_list = _node(
            "sensitivity_list", sensitivity_entry + ZeroOrMore(comma + sensitivity_entry)
        )
        process_end = kw["end"] + Opt(kw["postponed"]) + kw["process"]
        process_statement = _node(
            "process_statement",
            Opt(label)
            + Opt(kw["postponed"])
            + kw["process"]
            + Opt(lpar + sensitivity_list + rpar)
            + Opt(kw["is"])
            + _node("process_declarative_part", ZeroOrMore(process_declarative_item))
            + kw["begin"]
            + _node("sequence_of_statements", SkipTo(process_end))
            + process_end
            + Opt(name)
            + semi,
        )

        # Concurrent signal assignments
        target = name + Opt(nested_expr())
        arrow = Literal("<=")
        selected_signal_assignment = _node(
            "selected_signal_assignment",
            kw["with"]
            + Regex(r"[^;]+?(?=\bselect\b)", flags=re.IGNORECASE)
            + kw["select"]
            + Opt(Literal("?"))
            + target
            + arrow
            + Regex(r"[^;]+"),
        )
        conditional_signal_assignment = _node(
            "conditional_signal_assignment",
            target
            + arrow
            + Opt(kw["guarded"])
            + Regex(r"[^;]*?\bwhen\b[^;]*", flags=re.IGNORECASE),
        )
        simple_concurrent_signal_assignment = _node(
            "simple_concurrent_signal_assignment",
            target + arrow + Opt(kw["guarded"]) + Regex(r"[^;]+"),
        )
        concurrent_signal_assignment_statement = (
            Opt(Suppress(name + colon))
            + Opt(kw["postponed"])
            + (
                selected_signal_assignment
                | conditional_signal_assignment
                | simple_concurrent_signal_assignment
            )
            + semi
        )

        # Instantiations are recognized but never elaborated
        instantiated_unit = _node("instantiated_unit", name + ZeroOrMore(Literal(".") + name))
        map_aspect = (kw["generic"] | kw["port"]) + kw["map"] + nested_expr()
        component_instantiation_statement = (
            _node(
                "component_instantiation_statement",
                label
                + Opt(kw["component"] | kw["entity"] | kw["configuration"])
                + instantiated_unit
                + Opt(lpar + name + rpar)
                + OneOrMore(map_aspect),
            )
            + semi
        )

        # Generate and block regions are kept whole; their content is not lifted
        region = Forward()
        region_item = (
            region
            | Regex(r"(?:elsif\b[^;]*?|else\s*)\bgenerate\b", flags=re.IGNORECASE)
            | Regex(
                r"(?!end\s+(?:generate|block)\b)(?:(?!\b(?:generate|block)\b)[^;])+;",
                flags=re.IGNORECASE,
            )
        )
        generate_statement = _node(
            "generate_statement",
            label
            + Regex(r"(?:for|if|case)\b[^;]*?\bgenerate\b", flags=re.IGNORECASE)
            + ZeroOrMore(region_item)
            + kw["end"]
            + kw["generate"]
            + Opt(name)
            + semi,
        )
        block_statement = _node(
            "block_statement",
            label
            + kw["block"]
            + ZeroOrMore(region_item)
            + kw["end"]
            + kw["block"]
            + Opt(name)
            + semi,
        )
        region <<= generate_statement | block_statement

        concurrent_assertion_statement = (
            _node(
                "concurrent_assertion_statement",
                Opt(label)
                + Opt(kw["postponed"])
                + kw["assert"]
                + Regex(r'(?:"[^"\n]*"|[^;"])+'),
            )
            + semi
        )
        concurrent_procedure_call_statement = (
            _node(
                "concurrent_procedure_call_statement",
                Opt(label)
                + Opt(kw["postponed"])
                + _node("procedure_name", name + ZeroOrMore(Literal(".") + name))
                + Opt(nested_expr()),
            )
            + semi
        )

        concurrent_statement = (
            process_statement
            | region
            | component_instantiation_statement
            | concurrent_assertion_statement
            | concurrent_signal_assignment_statement
            | concurrent_procedure_call_statement
        )

        # Design units
        self.entity_declaration = _node(
            "entity_declaration",
            kw["entity"]
            + self.identifier
            + kw["is"]
            + entity_header
            + _node("entity_declarative_part", ZeroOrMore(block_declarative_item))
            + kw["end"]
            + Opt(kw["entity"])
            + Opt(name)
            + semi,
        )
        self.architecture_body = _node(
            "architecture_body",
            kw["architecture"]
            + self.identifier
            + kw["of"]
            + self.identifier
            + kw["is"]
            + _node("declarative_part", ZeroOrMore(block_declarative_item))
            + kw["begin"]
            + _node("concurrent_statement_part", ZeroOrMore(concurrent_statement))
            + kw["end"]
            + Opt(kw["architecture"])
            + Opt(name)
            + semi,
        )
        library_clause = _node(
            "library_clause",
            kw["library"] + self.identifier + ZeroOrMore(comma + self.identifier) + semi,
        )
        package_body = _node(
            "package_body",
            Regex(
                r"package\s+body\s+(\w+)\s+is\b[\s\S]*?\bend\s+"
                r"(?:package\s+body\b\s*(?:\1\b)?|\1\b)\s*;",
                flags=re.IGNORECASE,
            ),
        )
        package_declaration = _node(
            "package_declaration",
            Regex(
                r"package\s+(\w+)\s+is\b[\s\S]*?\bend\s+(?:package\b\s*(?:\1\b)?|\1\b)\s*;",
                flags=re.IGNORECASE,
            ),
        )
        configuration_declaration = _node(
            "configuration_declaration",
            Regex(
                r"configuration\s+(\w+)\s+of\s+\w+\s+is\b[\s\S]*?\bend\s+"
                r"(?:configuration\b\s*(?:\1\b)?|\1\b)\s*;",
                flags=re.IGNORECASE,
            ),
        )
        design_unit = (
            library_clause
            | use_clause
            | self.entity_declaration
            | self.architecture_body
            | package_body
            | package_declaration
            | configuration_declaration
        )

        # Anything else is skipped up to the next ';' and marked as an error
        error_node = _node(ERROR_KIND, Regex(r"[^;]*;") | Regex(r"[\s\S]+"))
        self.design_file = _node("design_file", ZeroOrMore(design_unit | error_node))

    def parse(self, text: str) -> SyntaxTree:
        """
        Parse VHDL text into a syntax tree.

        Comments are blanked first; node offsets index both the original
        and the blanked text.

        Raises:
            GrammarError: If pyparsing produces no tree at all
        """
        source = blank_comments(text)
        try:
            result = self.design_file.parse_string(source, parse_all=True)
        except ParseBaseException as e:
            logger.exception("Grammar failed on VHDL source: %s", e)
            raise GrammarError(f"VHDL grammar failed: {e.msg}", line=e.lineno) from e
        except RecursionError as e:
            raise GrammarError("VHDL source is nested too deeply for the grammar") from e

        tree = SyntaxTree(source=source, root=result[0])
        if tree.has_error:
            logger.debug("Syntax tree contains %d error node(s)", len(tree.error_nodes()))
        return tree
