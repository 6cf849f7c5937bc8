"""
Shared test fixtures for the Aura to LWC converter test suite.
"""

import pytest

from aura_lwc_converter.mappings import get_default_mappings
from aura_lwc_converter.markup_transformer import MarkupTransformer
from aura_lwc_converter.models import ElementNode, TextNode


CONTACT_CARD_MARKUP = """<?xml version="1.0" encoding="UTF-8"?>
<aura:component implements="flexipage:availableForRecordHome,force:hasRecordId" controller="ContactController" access="global">
    <aura:attribute name="contact" type="Contact" />
    <aura:attribute name="contacts" type="Contact[]" default="[]" description="Related contacts" />
    <aura:attribute name="isLoading" type="Boolean" default="false" required="true" />
    <aura:handler name="init" value="{!this}" action="{!c.doInit}" />
    <aura:registerEvent name="contactSelected" type="c:ContactSelectedEvent" />
    <aura:method name="refresh" action="{!c.handleRefresh}">
        <aura:attribute name="force" type="Boolean" />
    </aura:method>

    <force:recordData aura:id="recordLoader"
                      recordId="{!v.recordId}"
                      fields="['Name', 'Phone']"
                      targetFields="{!v.contact}" />
    <lightning:messageChannel type="Record_Selected__c" aura:id="selectionChannel" onMessage="{!c.handleMessage}" />

    <lightning:card title="{!v.contact.Name}" iconName="standard:contact">
        <aura:set attribute="actions">
            <lightning:button label="Refresh" onclick="{!c.handleRefresh}" />
        </aura:set>
        <aura:if isTrue="{!v.isLoading}">
            <lightning:spinner alternativeText="Loading" />
            <aura:set attribute="else">
                <ul>
                    <aura:iteration items="{!v.contacts}" var="item">
                        <li>{!item.Name}&nbsp;{!v.count > 1 ? 'many' : 'one'}</li>
                    </aura:iteration>
                </ul>
            </aura:set>
        </aura:if>
        <c:contactTile contact="{!v.contact}" />
    </lightning:card>
</aura:component>
"""


@pytest.fixture
def contact_card_markup():
    """A realistic record-page Aura component."""
    return CONTACT_CARD_MARKUP


@pytest.fixture
def contact_card_file(tmp_path):
    """The contact card markup written to ContactCard.cmp."""
    path = tmp_path / "ContactCard.cmp"
    path.write_text(CONTACT_CARD_MARKUP, encoding="utf-8")
    return path


@pytest.fixture
def transformer():
    return MarkupTransformer(get_default_mappings())


@pytest.fixture
def record_data_node():
    """A <force:recordData> loading two fields for the contactId attribute."""
    return ElementNode(
        tag="force:recordData",
        attributes={
            "aura:id": "recordLoader",
            "recordId": "{!v.contactId}",
            "fields": "['Name', 'Phone']",
            "targetFields": "{!v.contact}",
            "targetError": "{!v.error}",
        },
    )


@pytest.fixture
def message_channel_node():
    """A subscribing <lightning:messageChannel>."""
    return ElementNode(
        tag="lightning:messageChannel",
        attributes={
            "type": "Record_Selected__c",
            "aura:id": "selectionChannel",
            "onMessage": "{!c.handleMessage}",
            "scope": "APPLICATION",
        },
    )


@pytest.fixture
def iteration_node():
    """An <aura:iteration> with whitespace text around a single <li>."""
    return ElementNode(
        tag="aura:iteration",
        attributes={"items": "{!v.contacts}", "var": "contact"},
        children=(
            TextNode("\n    "),
            ElementNode(tag="li", children=(TextNode("{!contact.Name}"),)),
            TextNode("\n"),
        ),
    )
