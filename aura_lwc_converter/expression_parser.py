"""
Aura Expression Classifier
==========================
Classifies Aura data-binding expressions and rewrites them to LWC bindings.

Handles:
- Attribute references:  {!v.name}                  -> {name}
- Handler references:    {!c.handleClick}           -> {handleClick}
- Labels:                {!$Label.c.greeting}       -> {labelcgreeting}
- Reserved id:           {!globalId}                -> {globalId}
- Field access:          {!v.contact.Picture__c}    -> {picture}
- Negated references:    {!!v.isOpen}               -> {!isOpen}
- Anything with ternary, boolean, comparison, arithmetic or function calls
  is hoisted into a getter:  {!v.a ? 'x' : 'y'}    -> {computedValue1}
- Unbound expressions {#...} are treated exactly like {!...}

Unrecognized references ({!item.Name} inside an iteration) keep their
expression text and only lose the Aura sigil.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .models import DetectedGetter


# Every {!...} or {#...} occurrence in a text node or attribute value.
# Quoted strings may contain braces: {!v.a ? '}' : ''}
EXPRESSION_PATTERN = re.compile(
    r"\{[!#]((?:'(?:[^'\\]|\\.)*'|\"(?:[^\"\\]|\\.)*\"|[^}'\"])*)\}"
)

GETTER_PREFIX = "computedValue"

# Aura's word forms of comparison/boolean operators
WORD_OPERATORS = {"eq", "ne", "lt", "gt", "le", "ge", "and", "or", "not"}

# Suffixes on custom fields/relationships dropped when deriving accessor names
CUSTOM_FIELD_SUFFIXES = ("__c", "__r")


class ExpressionKind(Enum):
    SIMPLE_FLAT = "simple-flat"
    SIMPLE_DOTTED = "simple-dotted"
    COMPLEX = "complex"
    PASSTHROUGH = "passthrough"


@dataclass
class ClassifiedExpression:
    """Classification of one inner expression (without the {! } wrapper)."""
    kind: ExpressionKind
    source: str
    reference: str = ""     # LWC reference for simple and passthrough kinds
    negated: bool = False

    @property
    def is_complex(self) -> bool:
        return self.kind is ExpressionKind.COMPLEX


class Token:
    """A lexer token."""
    __slots__ = ("type", "value")

    def __init__(self, type_: str, value: str):
        self.type = type_
        self.value = value

    def __repr__(self):
        return f"Token({self.type}, {self.value!r})"


class ExpressionLexer:
    """Tokenize the inside of an Aura expression."""

    # Token patterns in priority order
    PATTERNS = [
        ("WHITESPACE", r"\s+"),
        ("STRING", r"'(?:[^'\\]|\\.)*'"),
        ("STRING_DQ", r'"(?:[^"\\]|\\.)*"'),
        ("NUMBER", r"\d+(?:\.\d+)?"),
        ("PATH", r"\$?[A-Za-z_]\w*(?:\.\w+)*"),
        ("OP_AND", r"&&"),
        ("OP_OR", r"\|\|"),
        ("OP_CMP", r"===?|!==?|>=|<=|>|<"),
        ("OP_NOT", r"!"),
        ("OP_TERNARY", r"\?"),
        ("COLON", r":"),
        ("OP_ARITH", r"[+\-*/%]"),
        ("LPAREN", r"\("),
        ("RPAREN", r"\)"),
        ("LBRACKET", r"\["),
        ("RBRACKET", r"\]"),
        ("COMMA", r","),
        ("UNKNOWN", r"."),
    ]

    def __init__(self):
        self._regex = re.compile(
            "|".join(f"(?P<{name}>{pattern})" for name, pattern in self.PATTERNS)
        )

    def tokenize(self, expression: str) -> list:
        """Tokenize an expression string into a list of Tokens."""
        tokens = []
        for match in self._regex.finditer(expression):
            name = match.lastgroup
            value = match.group()
            if name == "WHITESPACE":
                continue
            if name == "STRING_DQ":
                name = "STRING"
            elif name == "PATH" and value in WORD_OPERATORS:
                name = "OP_WORD"
            tokens.append(Token(name, value))
        return tokens


# Any of these makes an expression complex
COMPLEX_TOKEN_TYPES = {
    "OP_AND", "OP_OR", "OP_CMP", "OP_NOT", "OP_TERNARY", "COLON",
    "OP_ARITH", "OP_WORD", "LPAREN", "LBRACKET",
}

_lexer = ExpressionLexer()


def accessor_name(field_name: str) -> str:
    """
    Derive the getter name the JS generator exposes for a record field.

        Picture__c -> picture
        BillingCity -> billingCity
    """
    name = field_name
    for suffix in CUSTOM_FIELD_SUFFIXES:
        if name.endswith(suffix) and len(name) > len(suffix):
            name = name[: -len(suffix)]
            break
    return name[:1].lower() + name[1:]


def _classify_path(path: str) -> tuple:
    """Map a bare reference path to (kind, LWC reference)."""
    segments = path.split(".")
    root = segments[0]

    if root == "v" and len(segments) == 2:
        return ExpressionKind.SIMPLE_FLAT, segments[1]
    if root == "v" and len(segments) > 2:
        return ExpressionKind.SIMPLE_DOTTED, accessor_name(segments[-1])
    if root == "c" and len(segments) == 2:
        return ExpressionKind.SIMPLE_FLAT, segments[1]
    if root == "$Label" and len(segments) == 3:
        return ExpressionKind.SIMPLE_FLAT, f"label{segments[1]}{segments[2]}"
    if path == "globalId":
        return ExpressionKind.SIMPLE_FLAT, "globalId"

    return ExpressionKind.PASSTHROUGH, path


def classify_expression(expression: str) -> ClassifiedExpression:
    """
    Classify the inside of one Aura expression. Pure: nothing is registered.

    Examples:
        "v.name"                 -> SIMPLE_FLAT,   reference "name"
        "v.contact.Name"         -> SIMPLE_DOTTED, reference "name"
        "!v.isOpen"              -> SIMPLE_FLAT,   reference "!isOpen", negated
        "!(v.a ? true : false)"  -> COMPLEX
        "item.Name"              -> PASSTHROUGH,   reference "item.Name"
    """
    inner = expression.strip()
    tokens = _lexer.tokenize(inner)

    if not tokens:
        return ClassifiedExpression(ExpressionKind.PASSTHROUGH, inner, inner)

    # Negation immediately wrapping a bare reference stays inline
    if len(tokens) == 2 and tokens[0].type == "OP_NOT" and tokens[1].type == "PATH":
        kind, reference = _classify_path(tokens[1].value)
        return ClassifiedExpression(kind, inner, f"!{reference}", negated=True)

    if len(tokens) == 1 and tokens[0].type == "PATH":
        kind, reference = _classify_path(tokens[0].value)
        return ClassifiedExpression(kind, inner, reference)

    if any(tok.type in COMPLEX_TOKEN_TYPES for tok in tokens):
        return ClassifiedExpression(ExpressionKind.COMPLEX, inner)

    return ClassifiedExpression(ExpressionKind.PASSTHROUGH, inner, inner)


def register_getter(detected_getters: list, expression: str) -> str:
    """Append a DetectedGetter for a hoisted expression and return its name."""
    name = f"{GETTER_PREFIX}{len(detected_getters) + 1}"
    detected_getters.append(DetectedGetter(name=name, expression=expression))
    return name


def convert_expression(text: str, detected_getters: Optional[list] = None) -> str:
    """
    Rewrite every Aura expression in a text node or attribute value.

    Complex expressions are hoisted into ``detected_getters`` in left-to-right
    order. Text outside expressions is returned unchanged.
    """
    if not text:
        return text
    if detected_getters is None:
        detected_getters = []

    def _substitute(match: re.Match) -> str:
        classified = classify_expression(match.group(1))
        if classified.is_complex:
            return "{" + register_getter(detected_getters, classified.source) + "}"
        return "{" + classified.reference + "}"

    return EXPRESSION_PATTERN.sub(_substitute, text)


def is_single_expression(text: str) -> bool:
    """True when the whole (stripped) value is exactly one expression."""
    return bool(text) and EXPRESSION_PATTERN.fullmatch(text.strip()) is not None


def contains_expression(text: str) -> bool:
    return bool(text) and EXPRESSION_PATTERN.search(text) is not None


def strip_braces(binding: str) -> str:
    """'{name}' -> 'name'. Values without the outer braces are returned as-is."""
    value = binding.strip()
    if value.startswith("{") and value.endswith("}"):
        return value[1:-1]
    return value
