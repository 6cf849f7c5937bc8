"""
Tests for the side-channel extractors.
"""

from aura_lwc_converter.extractors import (
    extract_binding,
    extract_handler_name,
    extract_message_channel,
    extract_record_data,
    extract_slot_name,
    parse_field_list,
)


class TestBindingHelpers:

    def test_handler_name(self):
        assert extract_handler_name("{!c.handleMessage}") == "handleMessage"
        assert extract_handler_name("{# c.handleMessage }") == "handleMessage"

    def test_handler_name_missing(self):
        assert extract_handler_name("handleMessage") == ""
        assert extract_handler_name("") == ""
        assert extract_handler_name(None) == ""

    def test_binding_flat(self):
        assert extract_binding("{!v.contactId}") == "contactId"

    def test_binding_dotted_keeps_path(self):
        assert extract_binding("{!v.record.Id}") == "record.Id"

    def test_binding_literal_returned_unchanged(self):
        assert extract_binding("a0B000000000001") == "a0B000000000001"
        assert extract_binding("") == ""


class TestParseFieldList:

    def test_bracketed_list(self):
        assert parse_field_list("['Name', 'Title', 'Phone']") == ["Name", "Title", "Phone"]

    def test_double_quoted_items(self):
        assert parse_field_list('["Name","Email"]') == ["Name", "Email"]

    def test_plain_comma_list(self):
        assert parse_field_list("Name, Phone") == ["Name", "Phone"]

    def test_expression_yields_empty(self):
        assert parse_field_list("{!v.fields}") == []

    def test_empty_values(self):
        assert parse_field_list("") == []
        assert parse_field_list("[]") == []
        assert parse_field_list(None) == []


class TestExtractMessageChannel:

    def test_subscriber(self, message_channel_node):
        config = extract_message_channel(message_channel_node.attributes)
        assert config.channel_name == "Record_Selected__c"
        assert config.binding_id == "selectionChannel"
        assert config.message_handler_name == "handleMessage"
        assert config.scope == "APPLICATION"
        assert config.is_publisher_only is False

    def test_publisher_only(self):
        config = extract_message_channel({"type": "Cart__c", "aura:id": "cart"})
        assert config.is_publisher_only is True
        assert config.message_handler_name is None
        assert config.scope is None

    def test_missing_attributes_degrade_to_defaults(self):
        config = extract_message_channel({})
        assert config.channel_name == ""
        assert config.binding_id == ""
        assert config.is_publisher_only is True


class TestExtractRecordData:

    def test_full_declaration(self, record_data_node):
        config = extract_record_data(record_data_node.attributes)
        assert config.binding_id == "recordLoader"
        assert config.record_id_binding == "contactId"
        assert config.fields == ["Name", "Phone"]
        assert config.target_fields_binding == "contact"
        assert config.target_record_binding is None
        assert config.target_error_binding == "error"
        assert config.mode == "VIEW"

    def test_mode_is_uppercased(self):
        config = extract_record_data({"recordId": "{!v.recordId}", "mode": "edit"})
        assert config.mode == "EDIT"

    def test_attribute_names_case_insensitive(self):
        config = extract_record_data({"recordid": "{!v.recordId}", "FIELDS": "Name"})
        assert config.record_id_binding == "recordId"
        assert config.fields == ["Name"]

    def test_empty_attributes(self):
        config = extract_record_data({})
        assert config.record_id_binding == ""
        assert config.fields == []
        assert config.mode == "VIEW"

    def test_to_dict_uses_camel_case(self, record_data_node):
        data = extract_record_data(record_data_node.attributes).to_dict()
        assert data["recordIdBinding"] == "contactId"
        assert data["targetFieldsBinding"] == "contact"
        assert data["fields"] == ["Name", "Phone"]


class TestExtractSlotName:

    def test_slot_name(self):
        assert extract_slot_name({"attribute": "footer"}) == "footer"
        assert extract_slot_name({"attribute": "  title "}) == "title"

    def test_missing_slot_name(self):
        assert extract_slot_name({}) == ""
