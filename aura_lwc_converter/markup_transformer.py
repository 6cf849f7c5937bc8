"""
Aura Markup -> LWC Template Transformer
========================================
Walks a parsed Aura body depth-first (pre-order, left to right) and emits
an LWC HTML template plus the side-channel records the JS generator needs.

Every node is classified into one DirectiveKind and dispatched to one
handler. Handlers share a TransformContext: accumulators are shared by
reference across the whole walk, so traversal order fixes getter numbering
and warning order.

Output: TransformedMarkup (template text, warnings, directives, components,
LMS channels, record-data wires, facets, getters).
"""

import logging
import re
import textwrap
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional

from .expression_parser import (
    contains_expression,
    convert_expression,
    strip_braces,
)
from .extractors import (
    extract_message_channel,
    extract_record_data,
    extract_slot_name,
)
from .mappings import AURA_ID_ATTRIBUTE, MappingConfig, get_default_mappings
from .models import (
    ElementNode,
    FacetContent,
    ParsedComponent,
    TextNode,
    TransformedMarkup,
)
from .template_emitter import (
    INDENT,
    child_indent,
    format_attributes,
    is_binding,
    join_fragments,
    render_block,
    render_comment,
    render_document,
    render_empty_element,
    render_inline_element,
    render_text,
)

logger = logging.getLogger(__name__)

ELSE_FACET = "else"
KEY_ATTRIBUTE = "key"
DEFAULT_ITERATION_VAR = "item"
DEFAULT_HTML_TAG = "div"

# onClick, onMessage; not onlyIcons
EVENT_ATTRIBUTE = re.compile(r"on[A-Z]")


# ═══════════════════════════════════════════════════════════════════
# Node classification
# ═══════════════════════════════════════════════════════════════════

class DirectiveKind(Enum):
    TEXT = "text"
    MESSAGE_CHANNEL = "message-channel"
    RECORD_DATA = "record-data"
    CONDITIONAL = "conditional"
    ITERATION = "iteration"
    SLOT = "slot"
    RAW_HTML = "raw-html"
    METADATA = "metadata"
    ELEMENT = "element"


# Keyed by lowercased tag name
DIRECTIVE_TAGS = {
    "lightning:messagechannel": DirectiveKind.MESSAGE_CHANNEL,
    "force:recorddata": DirectiveKind.RECORD_DATA,
    "aura:if": DirectiveKind.CONDITIONAL,
    "aura:iteration": DirectiveKind.ITERATION,
    "aura:set": DirectiveKind.SLOT,
    "aura:html": DirectiveKind.RAW_HTML,
    "aura:attribute": DirectiveKind.METADATA,
    "aura:handler": DirectiveKind.METADATA,
    "aura:registerevent": DirectiveKind.METADATA,
    "aura:method": DirectiveKind.METADATA,
}


def classify_node(node) -> DirectiveKind:
    """Classify one source node into the kind that decides its handler."""
    if isinstance(node, TextNode):
        return DirectiveKind.TEXT
    return DIRECTIVE_TAGS.get(node.tag.lower(), DirectiveKind.ELEMENT)


# ═══════════════════════════════════════════════════════════════════
# Traversal context
# ═══════════════════════════════════════════════════════════════════

@dataclass
class TransformContext:
    """
    Accumulator threaded through one component's walk.

    ``for_parent`` returns a copy that shares every accumulator list and
    only changes ``parent_tag``. Never share a context between components.
    """
    mappings: MappingConfig
    warnings: list = field(default_factory=list)
    used_directives: list = field(default_factory=list)
    used_components: list = field(default_factory=list)
    lms_channels: list = field(default_factory=list)
    record_data_services: list = field(default_factory=list)
    facet_contents: list = field(default_factory=list)
    detected_getters: list = field(default_factory=list)
    parent_tag: Optional[str] = None

    def for_parent(self, parent_tag: str) -> "TransformContext":
        return replace(self, parent_tag=parent_tag)

    def warn(self, message: str):
        self.warnings.append(message)

    def use_directive(self, directive: str):
        if directive not in self.used_directives:
            self.used_directives.append(directive)

    def use_component(self, lwc_tag: str):
        if lwc_tag not in self.used_components:
            self.used_components.append(lwc_tag)

    def convert(self, text: str) -> str:
        """Rewrite expressions in text, hoisting complex ones into getters."""
        return convert_expression(text, self.detected_getters)

    def to_result(self, template_text: str) -> TransformedMarkup:
        return TransformedMarkup(
            template_text=template_text,
            warnings=self.warnings,
            used_directives=self.used_directives,
            used_components=self.used_components,
            lms_channels=self.lms_channels,
            record_data_services=self.record_data_services,
            facet_contents=self.facet_contents,
            detected_getters=self.detected_getters,
        )


def _is_else_facet(node) -> bool:
    return (
        classify_node(node) is DirectiveKind.SLOT
        and extract_slot_name(node.attributes) == ELSE_FACET
    )


def _has_rendered_children(element: ElementNode) -> bool:
    for child in element.children:
        if isinstance(child, ElementNode):
            return True
        if child.content.strip():
            return True
    return False


# ═══════════════════════════════════════════════════════════════════
# Transformer
# ═══════════════════════════════════════════════════════════════════

class MarkupTransformer:
    """Recursive Aura -> LWC markup transformer."""

    def __init__(self, mappings: Optional[MappingConfig] = None):
        self.mappings = mappings or get_default_mappings()
        self._handlers = {
            DirectiveKind.TEXT: self._transform_text,
            DirectiveKind.MESSAGE_CHANNEL: self._transform_message_channel,
            DirectiveKind.RECORD_DATA: self._transform_record_data,
            DirectiveKind.CONDITIONAL: self._transform_conditional,
            DirectiveKind.ITERATION: self._transform_iteration,
            DirectiveKind.SLOT: self._transform_slot,
            DirectiveKind.RAW_HTML: self._transform_raw_html,
            DirectiveKind.METADATA: self._transform_metadata,
            DirectiveKind.ELEMENT: self._transform_element,
        }
        missing = set(DirectiveKind) - set(self._handlers)
        if missing:
            raise RuntimeError(f"No handler for directive kinds: {sorted(k.value for k in missing)}")

    def new_context(self) -> TransformContext:
        return TransformContext(mappings=self.mappings)

    # --- Entry points ---

    def transform_nodes(self, nodes: list) -> TransformedMarkup:
        """Convert a list of top-level body nodes into a complete template."""
        context = self.new_context()
        body = self.transform_children(nodes, INDENT, context)
        result = context.to_result(render_document(body))

        logger.debug(f"Transformed markup with {len(result.warnings)} warnings")
        logger.debug(f"Used directives: {', '.join(result.used_directives)}")
        logger.debug(f"Used components: {', '.join(result.used_components)}")
        logger.debug(f"Detected {len(result.detected_getters)} complex expressions for getters")
        return result

    def transform_component(self, component: ParsedComponent) -> TransformedMarkup:
        return self.transform_nodes(component.body)

    # --- Recursion ---

    def transform(self, node, indent: str, context: TransformContext) -> str:
        """Render one node at the given indentation."""
        return self._handlers[classify_node(node)](node, indent, context)

    def transform_children(self, children, indent: str, context: TransformContext) -> str:
        return join_fragments(self.transform(child, indent, context) for child in children)

    def transform_iteration_children(
        self, children, indent: str, context: TransformContext, item_var: str
    ) -> str:
        """
        Like transform_children, but the first plain element child gets
        key={<item_var>.Id} unless it already declares a key. The source
        node is never modified; a copy carries the key.
        """
        children = list(children)
        key_index = next(
            (i for i, child in enumerate(children)
             if classify_node(child) is DirectiveKind.ELEMENT),
            None,
        )
        if key_index is None:
            if any(isinstance(c, ElementNode) or c.content.strip() for c in children):
                context.warn(
                    f"aura:iteration over {item_var} has no element to carry a key - add key manually"
                )
        elif not children[key_index].has_attr(KEY_ATTRIBUTE):
            target = children[key_index]
            key_binding = f"{{{item_var}.Id}}"
            children[key_index] = replace(
                target, attributes={**target.attributes, KEY_ATTRIBUTE: key_binding}
            )
            context.warn(
                f"Added key={key_binding} to iteration - verify .Id is the correct unique identifier"
            )

        fragments = []
        for child in children:
            fragments.append(self.transform(child, indent, context))
        return join_fragments(fragments)

    # --- Handlers ---

    def _transform_text(self, node: TextNode, indent: str, context: TransformContext) -> str:
        return render_text(context.convert(node.content), indent)

    def _transform_message_channel(self, node: ElementNode, indent: str, context: TransformContext) -> str:
        config = extract_message_channel(node.attributes)
        context.lms_channels.append(config)
        pattern = "publisher-only" if config.is_publisher_only else "subscriber"
        context.warn(
            f"lightning:messageChannel detected ({pattern}) - LMS code will be generated in JavaScript"
        )
        return ""

    def _transform_record_data(self, node: ElementNode, indent: str, context: TransformContext) -> str:
        config = extract_record_data(node.attributes)
        context.record_data_services.append(config)
        context.warn(
            "force:recordData detected - @wire(getRecord) will be generated in JavaScript"
        )
        return ""

    def _transform_conditional(self, node: ElementNode, indent: str, context: TransformContext) -> str:
        guard = None
        # An empty condition counts as missing
        if node.get_attr("isTrue").strip():
            guard = strip_braces(context.convert(node.get_attr("isTrue")))
        elif node.get_attr("isFalse").strip():
            guard = "!" + strip_braces(context.convert(node.get_attr("isFalse")))

        # The else facet is rendered as a sibling block, never inside the if block
        main_children = []
        else_fragments = []
        has_else = False
        for child in node.children:
            if _is_else_facet(child):
                has_else = True
                else_fragments.append(
                    self.transform_children(child.children, child_indent(indent), context)
                )
                continue
            main_children.append(child)

        main_content = self.transform_children(main_children, child_indent(indent), context)
        else_content = "".join(else_fragments)

        if guard is None:
            context.warn("aura:if without isTrue or isFalse - needs manual migration")
            marker = render_comment(indent, "TODO: Convert aura:if without a condition")
            return (marker + "\n" + main_content + else_content).rstrip("\n")

        context.use_directive("lwc:if")
        result = render_block(indent, f"<template lwc:if={{{guard}}}>", main_content, "</template>")
        if has_else:
            context.use_directive("lwc:else")
            result += "\n" + render_block(indent, "<template lwc:else>", else_content, "</template>")
        return result

    def _transform_iteration(self, node: ElementNode, indent: str, context: TransformContext) -> str:
        items = node.get_attr("items")
        item_var = node.get_attr("var") or DEFAULT_ITERATION_VAR
        index_var = node.get_attr("indexVar")

        if not items:
            context.warn("aura:iteration without items - set the for:each collection manually")
        collection = strip_braces(context.convert(items))
        context.use_directive("for:each")

        directives = f'for:each={{{collection}}} for:item="{item_var}"'
        if index_var:
            directives += f' for:index="{index_var}"'

        content = self.transform_iteration_children(
            node.children, child_indent(indent), context, item_var
        )
        return render_block(indent, f"<template {directives}>", content, "</template>")

    def _transform_slot(self, node: ElementNode, indent: str, context: TransformContext) -> str:
        slot_name = extract_slot_name(node.attributes)
        content = self.transform_children(node.children, child_indent(indent), context)
        context.facet_contents.append(
            FacetContent(slot_name=slot_name, rendered_content=textwrap.dedent(content).strip("\n"))
        )

        if not slot_name:
            context.warn("aura:set found without attribute name - needs manual migration")
            marker = render_comment(indent, "TODO: Convert aura:set to slot content")
            return (marker + "\n" + content).rstrip("\n")

        if slot_name not in self.mappings.slot_names(context.parent_tag):
            context.warn(
                f'aura:set attribute="{slot_name}" - verify slot name exists on parent component'
            )
        return render_block(indent, f'<div slot="{slot_name}">', content, "</div>")

    def _transform_raw_html(self, node: ElementNode, indent: str, context: TransformContext) -> str:
        tag = node.get_attr("tag").strip() or DEFAULT_HTML_TAG
        if contains_expression(tag):
            context.warn(
                f'aura:html tag="{tag}" is dynamic - rendered as <{DEFAULT_HTML_TAG}>, convert manually'
            )
            tag = DEFAULT_HTML_TAG
        body = context.convert(node.get_attr("body"))
        context.warn("aura:html found - verify dynamic HTML handling")

        children = self.transform_children(node.children, child_indent(indent), context)
        if not children:
            return render_inline_element(indent, tag, body)
        content = (render_text(body, child_indent(indent)) + "\n" if body.strip() else "") + children
        return render_block(indent, f"<{tag}>", content, f"</{tag}>")

    def _transform_metadata(self, node: ElementNode, indent: str, context: TransformContext) -> str:
        # Declarations are consumed by the JS generator
        return ""

    def _transform_element(self, node: ElementNode, indent: str, context: TransformContext) -> str:
        lwc_tag, mapping = self.mappings.resolve_tag(node.tag)
        if lwc_tag != node.tag:
            context.use_component(lwc_tag)
        elif ":" in node.tag:
            logger.debug(f"No LWC mapping for <{node.tag}>, passing through unchanged")

        attr_string = format_attributes(self._convert_attributes(node, mapping, context))

        if not _has_rendered_children(node):
            return render_empty_element(indent, lwc_tag, attr_string)

        content = self.transform_children(
            node.children, child_indent(indent), context.for_parent(lwc_tag)
        )
        return render_block(indent, f"<{lwc_tag}{attr_string}>", content, f"</{lwc_tag}>")

    def _convert_attributes(self, node: ElementNode, mapping, context: TransformContext) -> list:
        """[(lwc name, lwc value), ...] in source order."""
        converted = []
        for name, value in node.attributes.items():
            if name == AURA_ID_ATTRIBUTE:
                converted.append((self.mappings.resolve_attribute(name), value))
                continue

            if mapping and name in mapping.attributes:
                lwc_name = mapping.attributes[name]
            elif EVENT_ATTRIBUTE.match(name):
                # Event handlers are lowercase in LWC: onClick -> onclick
                lwc_name = name.lower()
            else:
                lwc_name = self.mappings.resolve_attribute(name, mapping)

            lwc_value = context.convert(value)
            if contains_expression(value) and not is_binding(lwc_value):
                context.warn(
                    f'<{node.tag}> attribute "{name}" mixes text and expressions - '
                    f"LWC needs a single binding, use a getter"
                )
            converted.append((lwc_name, lwc_value))
        return converted


def transform_aura_markup(source, mappings: Optional[MappingConfig] = None) -> TransformedMarkup:
    """
    Convert parsed Aura markup to an LWC template.

    Args:
        source: A ParsedComponent, or a list of top-level body nodes.
        mappings: Optional MappingConfig; the built-in tables by default.

    Returns:
        TransformedMarkup with a fresh set of accumulators.
    """
    transformer = MarkupTransformer(mappings)
    if isinstance(source, ParsedComponent):
        return transformer.transform_component(source)
    return transformer.transform_nodes(list(source))
