"""
LWC template emitter.

Fragments are plain strings with their indentation already applied and no
trailing newline. Sibling fragments are joined with newlines; a joined
block always ends with a newline so it can sit between an opening and a
closing tag line.
"""

import re

INDENT = "    "
ROOT_OPEN = "<template>"
ROOT_CLOSE = "</template>"

_BINDING = re.compile(r"\{[^{}]*\}")


def child_indent(indent: str) -> str:
    return indent + INDENT


def join_fragments(fragments) -> str:
    """Join non-empty sibling fragments, one per line."""
    parts = [f for f in fragments if f]
    if not parts:
        return ""
    return "\n".join(parts) + "\n"


def render_text(text: str, indent: str) -> str:
    """Indent each non-blank line of a text node. Whitespace-only text renders as ''."""
    lines = [line.strip() for line in text.splitlines()]
    return "\n".join(f"{indent}{line}" for line in lines if line)


def render_comment(indent: str, text: str) -> str:
    return f"{indent}<!-- {text} -->"


def render_block(indent: str, open_tag: str, content: str, close_tag: str) -> str:
    """An opening line, the already-indented content, and a closing line."""
    return f"{indent}{open_tag}\n{content}{indent}{close_tag}"


def render_empty_element(indent: str, tag: str, attr_string: str = "") -> str:
    """Childless element on one line. LWC templates require an explicit end tag."""
    return f"{indent}<{tag}{attr_string}></{tag}>"


def render_inline_element(indent: str, tag: str, content: str) -> str:
    return f"{indent}<{tag}>{content}</{tag}>"


def is_binding(value: str) -> bool:
    """True when the value is a single LWC binding such as '{name}'."""
    return _BINDING.fullmatch(value or "") is not None


def escape_attribute(value: str) -> str:
    return value.replace("&", "&amp;").replace('"', "&quot;").replace("<", "&lt;")


def format_attribute(name: str, value: str) -> str:
    """Bindings are emitted unquoted, static values quoted."""
    if is_binding(value):
        return f"{name}={value}"
    return f'{name}="{escape_attribute(value)}"'


def format_attributes(attributes: list) -> str:
    """[(name, value), ...] -> ' a="1" b={x}' (leading space when non-empty)."""
    if not attributes:
        return ""
    return " " + " ".join(format_attribute(name, value) for name, value in attributes)


def render_document(body: str) -> str:
    """Wrap the converted body in the mandatory root <template>."""
    return f"{ROOT_OPEN}\n{body}{ROOT_CLOSE}"
