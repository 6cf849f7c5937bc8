"""
Aura .cmp Markup Parser
=======================
Parses Aura component markup into a ParsedComponent: metadata declarations
(attributes, handlers, registered events, methods), the body tree handed to
the markup transformer, facets, expressions and component dependencies.

Aura markup uses namespace prefixes (aura:, lightning:, c:, ...) without
declaring them, so the prefixes are bound on a wrapper element before the
text goes through ElementTree, then mapped back to "prefix:name".
"""

import logging
import re
import xml.etree.ElementTree as ET
from html.entities import name2codepoint
from pathlib import Path
from typing import Optional

from .expression_parser import EXPRESSION_PATTERN
from .models import (
    AuraAttribute,
    AuraEvent,
    AuraExpression,
    AuraHandler,
    AuraMethod,
    ElementNode,
    ParsedComponent,
    TextNode,
)

logger = logging.getLogger(__name__)

COMPONENT_TAG = "aura:component"
WRAPPER_TAG = "aura-lwc-converter-root"
NAMESPACE_URI = "urn:aura-lwc-converter:{}"

XML_ENTITIES = {"amp", "lt", "gt", "quot", "apos"}
DEPENDENCY_PREFIXES = ("lightning:", "ui:", "force:", "c:")

_XML_DECLARATION = re.compile(r"^\s*<\?xml[^>]*\?>")
_ENTITY = re.compile(r"&([A-Za-z][A-Za-z0-9]*);")
_TAG_PREFIX = re.compile(r"</?([A-Za-z_][\w.-]*):[A-Za-z_]")
_ATTR_PREFIX = re.compile(r"\s([A-Za-z_][\w.-]*):[A-Za-z_][\w.-]*\s*=")


class MarkupParseError(ValueError):
    """Markup is not well-formed or has no <aura:component> root."""


# ── Pre-processing ───────────────────────────────────────────────────

def _replace_html_entities(markup: str) -> str:
    """&nbsp; and friends are not XML; turn them into numeric references."""
    def _numeric(match: re.Match) -> str:
        name = match.group(1)
        if name in XML_ENTITIES:
            return match.group(0)
        codepoint = name2codepoint.get(name)
        return f"&#{codepoint};" if codepoint else match.group(0)

    return _ENTITY.sub(_numeric, markup)


def _find_prefixes(markup: str) -> list:
    prefixes = set(_TAG_PREFIX.findall(markup)) | set(_ATTR_PREFIX.findall(markup))
    prefixes -= {"xmlns", "xml"}
    return sorted(prefixes)


def _wrap_markup(markup: str) -> tuple:
    """Return (wrapped markup, {namespace uri: prefix})."""
    body = _replace_html_entities(_XML_DECLARATION.sub("", markup, count=1))
    uri_to_prefix = {}
    declarations = []
    for prefix in _find_prefixes(body):
        uri = NAMESPACE_URI.format(prefix)
        uri_to_prefix[uri] = prefix
        declarations.append(f'xmlns:{prefix}="{uri}"')
    open_tag = " ".join([WRAPPER_TAG] + declarations)
    return f"<{open_tag}>{body}</{WRAPPER_TAG}>", uri_to_prefix


def _qualified_name(name: str, uri_to_prefix: dict) -> str:
    """'{urn:...:aura}id' -> 'aura:id'."""
    if not name.startswith("{"):
        return name
    uri, _, local = name[1:].partition("}")
    prefix = uri_to_prefix.get(uri)
    return f"{prefix}:{local}" if prefix else local


def _to_node(element, uri_to_prefix: dict) -> ElementNode:
    """Recursively convert an ElementTree element to an ElementNode."""
    children = []
    if element.text:
        children.append(TextNode(element.text))
    for sub in element:
        children.append(_to_node(sub, uri_to_prefix))
        if sub.tail:
            children.append(TextNode(sub.tail))

    return ElementNode(
        tag=_qualified_name(element.tag, uri_to_prefix),
        attributes={
            _qualified_name(key, uri_to_prefix): value
            for key, value in element.attrib.items()
        },
        children=tuple(children),
    )


def _find_component(node: ElementNode) -> Optional[ElementNode]:
    if node.tag.lower() == COMPONENT_TAG:
        return node
    for child in node.element_children():
        found = _find_component(child)
        if found:
            return found
    return None


# ── Metadata ─────────────────────────────────────────────────────────

def _parse_attribute(element: ElementNode) -> AuraAttribute:
    return AuraAttribute(
        name=element.get_attr("name"),
        type=element.get_attr("type", "String"),
        default=element.attributes.get("default"),
        description=element.get_attr("description"),
        required=element.get_attr("required").lower() == "true",
        access=element.get_attr("access"),
    )


def _parse_handler(element: ElementNode) -> AuraHandler:
    return AuraHandler(
        name=element.get_attr("name"),
        event=element.get_attr("event"),
        action=element.get_attr("action"),
        phase=element.get_attr("phase"),
    )


def _parse_method(element: ElementNode) -> AuraMethod:
    params = [
        {"name": child.get_attr("name"), "type": child.get_attr("type", "Object")}
        for child in element.element_children()
        if child.tag.lower() == "aura:attribute"
    ]
    return AuraMethod(
        name=element.get_attr("name"),
        action=element.get_attr("action"),
        attributes=params,
    )


def extract_expressions(markup: str) -> list:
    """Find every {!...} / {#...} expression and classify its reference type."""
    expressions = []
    for match in EXPRESSION_PATTERN.finditer(markup):
        expr = match.group(1).strip()
        expr_type, reference = "other", expr
        if expr.startswith("v."):
            expr_type, reference = "attribute", expr[2:]
        elif expr.startswith("c."):
            expr_type, reference = "controller", expr[2:]
        elif expr.startswith("helper."):
            expr_type, reference = "helper", expr[7:]
        elif expr.startswith("$Label."):
            expr_type, reference = "label", expr[7:]
        elif expr == "globalId":
            expr_type = "globalId"
        expressions.append(AuraExpression(original=match.group(0), type=expr_type, reference=reference))
    return expressions


def find_dependencies(nodes: list) -> list:
    """Namespaced component tags used in the body, in first-seen order."""
    deps = []

    def _traverse(node):
        if not isinstance(node, ElementNode):
            return
        if node.tag.lower().startswith(DEPENDENCY_PREFIXES) and node.tag not in deps:
            deps.append(node.tag)
        for child in node.children:
            _traverse(child)

    for node in nodes:
        _traverse(node)
    return deps


# ── Entry points ─────────────────────────────────────────────────────

def parse_aura_markup(markup: str, component_name: str) -> ParsedComponent:
    """
    Parse Aura component markup.

    Raises:
        MarkupParseError: the markup is not well-formed or has no <aura:component>.
    """
    wrapped, uri_to_prefix = _wrap_markup(markup)
    try:
        root = ET.fromstring(wrapped)
    except ET.ParseError as e:
        raise MarkupParseError(f"Failed to parse Aura markup for {component_name}: {e}") from e

    component = _find_component(_to_node(root, uri_to_prefix))
    if component is None:
        raise MarkupParseError(f"No <aura:component> found in markup for {component_name}")

    result = ParsedComponent(component_name=component_name)

    implements = component.get_attr("implements")
    if implements:
        result.implements = [s.strip() for s in implements.split(",") if s.strip()]
    result.extends = component.get_attr("extends")
    result.extensible = component.get_attr("extensible").lower() == "true"
    result.abstract = component.get_attr("abstract").lower() == "true"
    result.controller = component.get_attr("controller")

    body = []
    for child in component.children:
        if isinstance(child, TextNode):
            if child.content.strip():
                body.append(child)
            continue

        tag = child.tag.lower()
        if tag == "aura:attribute":
            attr = _parse_attribute(child)
            result.attributes.append(attr)
            logger.debug(f"Found attribute: {attr.name} ({attr.type})")
        elif tag == "aura:handler":
            handler = _parse_handler(child)
            result.handlers.append(handler)
            logger.debug(f"Found handler: {handler.name} -> {handler.action}")
        elif tag == "aura:registerevent":
            event = AuraEvent(name=child.get_attr("name"), type=child.get_attr("type"))
            result.registered_events.append(event)
            logger.debug(f"Found registered event: {event.name}")
        elif tag == "aura:method":
            method = _parse_method(child)
            result.methods.append(method)
            logger.debug(f"Found method: {method.name}")
        elif tag == "aura:set":
            facet = child.get_attr("attribute")
            if facet:
                result.facets[facet] = list(child.children)
        else:
            body.append(child)

    result.body = body
    result.expressions = extract_expressions(markup)
    result.dependencies = find_dependencies(body)

    logger.info(
        f"Parsed {component_name}: {len(result.attributes)} attributes, "
        f"{len(result.handlers)} handlers, {len(result.registered_events)} events, "
        f"{len(result.methods)} methods, {len(result.dependencies)} dependencies"
    )
    return result


class AuraMarkupParser:
    """Parses an Aura .cmp file into a ParsedComponent."""

    def __init__(self, filepath: str):
        self.filepath = Path(filepath)

    @property
    def component_name(self) -> str:
        return self.filepath.stem

    def parse(self) -> ParsedComponent:
        markup = self.filepath.read_text(encoding="utf-8")
        return parse_aura_markup(markup, self.component_name)
