"""
Side-channel extractors.

Turn the attributes of directive elements that produce no markup
(<lightning:messageChannel>, <force:recordData>) or only slot content
(<aura:set>) into structured configs for the JS generator. All functions
are permissive: a missing or malformed attribute degrades to an empty
default and never raises.
"""

import re
from typing import Optional

from .expression_parser import EXPRESSION_PATTERN, is_single_expression
from .models import LmsChannelConfig, RecordDataConfig

# {!c.handleMessage} -> handleMessage
HANDLER_PATTERN = re.compile(r"\{[!#]\s*c\.(\w+)\s*\}")

# "['Name', 'Phone']" -> "'Name', 'Phone'"
FIELD_LIST_PATTERN = re.compile(r"\[([^\]]*)\]")

DEFAULT_RECORD_MODE = "VIEW"


def _get_attr(attributes: dict, name: str, default: str = "") -> str:
    """Case-insensitive attribute lookup returning a stripped string."""
    if not attributes:
        return default
    value = attributes.get(name)
    if value is None:
        lowered = name.lower()
        for key, candidate in attributes.items():
            if key.lower() == lowered:
                value = candidate
                break
    if value is None:
        return default
    return str(value).strip()


def extract_handler_name(value: str) -> str:
    """'{!c.handleMessage}' -> 'handleMessage'; anything else -> ''."""
    match = HANDLER_PATTERN.search(value or "")
    return match.group(1) if match else ""


def extract_binding(value: str) -> str:
    """
    Resolve a binding attribute to the property path the JS class will own.

        '{!v.contactId}'    -> 'contactId'
        '{!v.record.Id}'    -> 'record.Id'
        'a0B000000000001'   -> 'a0B000000000001'
    """
    value = (value or "").strip()
    if not is_single_expression(value):
        return value
    inner = EXPRESSION_PATTERN.fullmatch(value).group(1).strip()
    for sigil in ("v.", "c."):
        if inner.startswith(sigil):
            return inner[len(sigil):]
    return inner


def parse_field_list(value: str) -> list:
    """
    Parse a field list attribute.

        "['Name', 'Title', 'Phone']" -> ["Name", "Title", "Phone"]
        "Name, Phone"                -> ["Name", "Phone"]
        "{!v.fields}"                -> []
    """
    value = (value or "").strip()
    if not value or EXPRESSION_PATTERN.search(value):
        return []
    match = FIELD_LIST_PATTERN.search(value)
    raw = match.group(1) if match else value
    fields = []
    for part in raw.split(","):
        name = part.strip().strip("'\"").strip()
        if name:
            fields.append(name)
    return fields


def _optional_binding(attributes: dict, name: str) -> Optional[str]:
    binding = extract_binding(_get_attr(attributes, name))
    return binding or None


def extract_message_channel(attributes: dict) -> LmsChannelConfig:
    """Build an LmsChannelConfig from <lightning:messageChannel> attributes."""
    handler_name = extract_handler_name(_get_attr(attributes, "onMessage"))
    scope = _get_attr(attributes, "scope")
    return LmsChannelConfig(
        channel_name=_get_attr(attributes, "type"),
        binding_id=_get_attr(attributes, "aura:id"),
        message_handler_name=handler_name or None,
        scope=scope or None,
        is_publisher_only=not handler_name,
    )


def extract_record_data(attributes: dict) -> RecordDataConfig:
    """Build a RecordDataConfig from <force:recordData> attributes."""
    mode = _get_attr(attributes, "mode").upper() or DEFAULT_RECORD_MODE
    return RecordDataConfig(
        binding_id=_get_attr(attributes, "aura:id"),
        record_id_binding=extract_binding(_get_attr(attributes, "recordId")),
        fields=parse_field_list(_get_attr(attributes, "fields")),
        target_fields_binding=_optional_binding(attributes, "targetFields"),
        target_record_binding=_optional_binding(attributes, "targetRecord"),
        target_error_binding=_optional_binding(attributes, "targetError"),
        mode=mode,
    )


def extract_slot_name(attributes: dict) -> str:
    """The facet name of an <aura:set>, '' when missing."""
    return _get_attr(attributes, "attribute")
