"""
Tests for the Aura .cmp markup parser.
"""

import xml.etree.ElementTree as ET

import pytest

from aura_lwc_converter.models import ElementNode, TextNode
from aura_lwc_converter.parser import (
    AuraMarkupParser,
    MarkupParseError,
    extract_expressions,
    find_dependencies,
    parse_aura_markup,
)


class TestParseAuraMarkup:

    def test_component_attributes(self, contact_card_markup):
        component = parse_aura_markup(contact_card_markup, "ContactCard")
        assert component.component_name == "ContactCard"
        assert component.implements == ["flexipage:availableForRecordHome", "force:hasRecordId"]
        assert component.controller == "ContactController"
        assert component.extends == ""
        assert component.extensible is False
        assert component.abstract is False

    def test_declared_attributes(self, contact_card_markup):
        component = parse_aura_markup(contact_card_markup, "ContactCard")
        names = [a.name for a in component.attributes]
        assert names == ["contact", "contacts", "isLoading"]
        contacts = component.attributes[1]
        assert contacts.type == "Contact[]"
        assert contacts.default == "[]"
        assert contacts.description == "Related contacts"
        assert component.attributes[0].default is None
        assert component.attributes[2].required is True

    def test_handlers_events_methods(self, contact_card_markup):
        component = parse_aura_markup(contact_card_markup, "ContactCard")
        assert len(component.handlers) == 1
        assert component.handlers[0].name == "init"
        assert component.handlers[0].action == "{!c.doInit}"
        assert component.registered_events[0].name == "contactSelected"
        assert component.registered_events[0].type == "c:ContactSelectedEvent"
        assert component.methods[0].name == "refresh"
        assert component.methods[0].attributes == [{"name": "force", "type": "Boolean"}]

    def test_body_excludes_metadata_and_whitespace(self, contact_card_markup):
        component = parse_aura_markup(contact_card_markup, "ContactCard")
        assert [n.tag for n in component.body] == [
            "force:recordData", "lightning:messageChannel", "lightning:card",
        ]

    def test_prefixed_attribute_names_restored(self, contact_card_markup):
        component = parse_aura_markup(contact_card_markup, "ContactCard")
        record_data = component.body[0]
        assert record_data.attributes["aura:id"] == "recordLoader"
        assert list(record_data.attributes) == ["aura:id", "recordId", "fields", "targetFields"]

    def test_dependencies_in_first_seen_order(self, contact_card_markup):
        component = parse_aura_markup(contact_card_markup, "ContactCard")
        assert component.dependencies == [
            "force:recordData",
            "lightning:messageChannel",
            "lightning:card",
            "lightning:button",
            "lightning:spinner",
            "c:contactTile",
        ]

    def test_html_entities(self):
        component = parse_aura_markup(
            "<aura:component><p>A&nbsp;B &amp; C</p></aura:component>", "Entities"
        )
        assert component.body[0].children == (TextNode("A\xa0B & C"),)

    def test_text_and_tail(self):
        component = parse_aura_markup(
            "<aura:component><p>Hi</p>after</aura:component>", "Tail"
        )
        paragraph, tail = component.body
        assert isinstance(paragraph, ElementNode)
        assert paragraph.children == (TextNode("Hi"),)
        assert tail == TextNode("after")

    def test_top_level_facets(self):
        markup = (
            '<aura:component extends="c:base">'
            '<aura:set attribute="title"><b>Hello</b></aura:set>'
            "<div>Body</div>"
            "</aura:component>"
        )
        component = parse_aura_markup(markup, "Child")
        assert component.extends == "c:base"
        assert list(component.facets) == ["title"]
        assert component.facets["title"][0].tag == "b"
        assert [n.tag for n in component.body] == ["div"]

    def test_flags(self):
        component = parse_aura_markup(
            '<aura:component extensible="true" abstract="TRUE"/>', "Base"
        )
        assert component.extensible is True
        assert component.abstract is True
        assert component.body == []


class TestParseErrors:

    def test_malformed_markup(self):
        with pytest.raises(MarkupParseError) as exc_info:
            parse_aura_markup("<aura:component><div></aura:component>", "Broken")
        assert isinstance(exc_info.value, ValueError)
        assert isinstance(exc_info.value.__cause__, ET.ParseError)
        assert "Broken" in str(exc_info.value)

    def test_missing_component_root(self):
        with pytest.raises(MarkupParseError, match="No <aura:component>"):
            parse_aura_markup("<div>Not a component</div>", "NotAura")


class TestExpressions:

    def test_expression_types(self):
        expressions = extract_expressions(
            "{!v.name} {!c.save} {!helper.load} {!$Label.c.title} {!globalId} {!item.Name} {#v.id}"
        )
        assert [(e.type, e.reference) for e in expressions] == [
            ("attribute", "name"),
            ("controller", "save"),
            ("helper", "load"),
            ("label", "c.title"),
            ("globalId", "globalId"),
            ("other", "item.Name"),
            ("attribute", "id"),
        ]
        assert expressions[0].original == "{!v.name}"

    def test_component_expressions(self, contact_card_markup):
        component = parse_aura_markup(contact_card_markup, "ContactCard")
        types = {e.type for e in component.expressions}
        assert {"attribute", "controller", "other"} <= types


class TestFindDependencies:

    def test_nested_and_deduplicated(self):
        nodes = [
            ElementNode("div", {}, (
                ElementNode("lightning:button"),
                ElementNode("ui:outputText"),
                ElementNode("lightning:button"),
            )),
            TextNode("x"),
            ElementNode("aura:if", {}, (ElementNode("c:childCmp"),)),
        ]
        assert find_dependencies(nodes) == ["lightning:button", "ui:outputText", "c:childCmp"]


class TestAuraMarkupParser:

    def test_parse_file(self, contact_card_file):
        parser = AuraMarkupParser(str(contact_card_file))
        component = parser.parse()
        assert parser.component_name == "ContactCard"
        assert component.component_name == "ContactCard"
        assert len(component.body) == 3
