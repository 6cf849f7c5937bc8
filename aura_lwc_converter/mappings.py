"""
Aura -> LWC tag and attribute resolution.

Lookup order for a tag:
    1. explicit table entry (mappings/aura_to_lwc.yaml)
    2. namespace rules: lightning:, ui:, c:
    3. passthrough unchanged
"""

import logging
import re
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_MAPPINGS_PATH = Path(__file__).parent / "mappings" / "aura_to_lwc.yaml"

# Attribute that carries a per-node id in Aura, and its LWC replacement
AURA_ID_ATTRIBUTE = "aura:id"
LWC_ID_ATTRIBUTE = "data-id"

_CAMEL_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")


def camel_to_kebab(name: str) -> str:
    """iconName -> icon-name, buttonIcon -> button-icon."""
    return _CAMEL_BOUNDARY.sub(r"\1-\2", name).lower()


@dataclass
class ComponentMapping:
    """One explicit component entry."""
    aura_tag: str
    lwc: Optional[str] = None
    attributes: dict = field(default_factory=dict)


@dataclass
class MappingConfig:
    """Component, attribute and slot tables used by the markup transformer."""
    components: dict = field(default_factory=dict)  # {aura tag lowercased: ComponentMapping}
    slots: dict = field(default_factory=dict)       # {lwc tag: [slot names]}

    def get_component(self, aura_tag: str) -> Optional[ComponentMapping]:
        return self.components.get(aura_tag.lower())

    def resolve_tag(self, aura_tag: str) -> tuple:
        """
        Resolve an Aura tag name to (lwc_tag, ComponentMapping or None).
        Unknown tags come back unchanged.
        """
        mapping = self.get_component(aura_tag)
        if mapping and mapping.lwc:
            return mapping.lwc, mapping

        lwc_tag = _resolve_namespace(aura_tag)
        if lwc_tag:
            return lwc_tag, mapping

        return aura_tag, mapping

    def resolve_attribute(self, name: str, mapping: Optional[ComponentMapping] = None) -> str:
        """Resolve an attribute name via the component's table, else camel -> kebab."""
        if name == AURA_ID_ATTRIBUTE:
            return LWC_ID_ATTRIBUTE
        if mapping and name in mapping.attributes:
            return mapping.attributes[name]
        return camel_to_kebab(name)

    def slot_names(self, lwc_tag: Optional[str]) -> list:
        if not lwc_tag:
            return []
        return self.slots.get(lwc_tag, [])


def _resolve_namespace(aura_tag: str) -> Optional[str]:
    """Namespace convention rules. Returns None when no rule applies."""
    prefix, _, base = aura_tag.partition(":")
    if not base:
        return None
    prefix = prefix.lower()

    if prefix == "lightning":
        return f"lightning-{camel_to_kebab(base)}"

    if prefix == "ui":
        lowered = base.lower()
        if lowered.startswith("input"):
            return "lightning-input"
        if lowered.startswith("output"):
            return "lightning-formatted-text"
        if lowered == "button":
            return "lightning-button"
        return None

    if prefix == "c":
        return f"c-{camel_to_kebab(base)}"

    return None


def _parse_components(raw: dict) -> dict:
    components = {}
    for aura_tag, entry in (raw or {}).items():
        if entry is None:
            entry = {}
        if not isinstance(entry, dict):
            logger.warning(f"Ignoring malformed mapping for {aura_tag}: {entry!r}")
            continue
        components[str(aura_tag).lower()] = ComponentMapping(
            aura_tag=str(aura_tag),
            lwc=entry.get("lwc"),
            attributes=dict(entry.get("attributes") or {}),
        )
    return components


def _parse_slots(raw: dict) -> dict:
    slots = {}
    for lwc_tag, names in (raw or {}).items():
        if not isinstance(names, list):
            logger.warning(f"Ignoring malformed slot list for {lwc_tag}: {names!r}")
            continue
        slots[str(lwc_tag)] = [str(n) for n in names]
    return slots


def _read_yaml(path: Path) -> dict:
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Mapping file {path} must contain a mapping at the top level")
    return data


@lru_cache(maxsize=1)
def get_default_mappings() -> MappingConfig:
    """Built-in tables, loaded once per process."""
    data = _read_yaml(DEFAULT_MAPPINGS_PATH)
    return MappingConfig(
        components=_parse_components(data.get("components")),
        slots=_parse_slots(data.get("slots")),
    )


def load_mappings(path: Optional[str] = None) -> MappingConfig:
    """
    Load the built-in tables, merging an optional override YAML over them.

    The override file has the same shape as the built-in one; its component
    and slot entries replace built-in entries with the same key.
    """
    defaults = get_default_mappings()
    config = MappingConfig(
        components=dict(defaults.components),
        slots=dict(defaults.slots),
    )
    if path is None:
        return config

    data = _read_yaml(Path(path))
    config.components.update(_parse_components(data.get("components")))
    config.slots.update(_parse_slots(data.get("slots")))
    logger.info(
        f"Loaded mapping overrides from {path}: "
        f"{len(data.get('components') or {})} components, {len(data.get('slots') or {})} slot tables"
    )
    return config
