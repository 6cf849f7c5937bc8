"""
Data models for parsed Aura markup and the converted LWC template.
"""

from dataclasses import dataclass, field
from typing import Optional, Union


@dataclass(frozen=True)
class TextNode:
    """A run of character data between elements."""
    content: str

    def __repr__(self):
        return f"TextNode({self.content[:40]!r})"


@dataclass(frozen=True)
class ElementNode:
    """A markup element. Attribute order is document order."""
    tag: str                # e.g., "lightning:card", "aura:if", "div"
    attributes: dict = field(default_factory=dict)
    children: tuple = ()    # Tuple[SourceNode]

    def get_attr(self, name: str, default: str = "") -> str:
        """Case-insensitive attribute lookup."""
        if name in self.attributes:
            return self.attributes[name]
        lowered = name.lower()
        for key, value in self.attributes.items():
            if key.lower() == lowered:
                return value
        return default

    def has_attr(self, name: str) -> bool:
        lowered = name.lower()
        return any(key.lower() == lowered for key in self.attributes)

    def element_children(self) -> list:
        return [c for c in self.children if isinstance(c, ElementNode)]

    def __repr__(self):
        return f"ElementNode({self.tag}, {len(self.attributes)} attrs, {len(self.children)} children)"


SourceNode = Union[ElementNode, TextNode]


# ── Component metadata ───────────────────────────────────────────────

@dataclass
class AuraAttribute:
    """An <aura:attribute> declaration."""
    name: str
    type: str = "String"
    default: Optional[str] = None
    description: str = ""
    required: bool = False
    access: str = ""


@dataclass
class AuraHandler:
    """An <aura:handler> declaration."""
    name: str
    event: str = ""
    action: str = ""
    phase: str = ""


@dataclass
class AuraEvent:
    """An <aura:registerEvent> declaration."""
    name: str
    type: str = ""


@dataclass
class AuraMethod:
    """An <aura:method> declaration with its parameter attributes."""
    name: str
    action: str = ""
    attributes: list = field(default_factory=list)  # List[dict] with name/type


@dataclass
class AuraExpression:
    """A {!...} expression found anywhere in the markup."""
    original: str
    type: str        # attribute, controller, helper, label, globalId, other
    reference: str


@dataclass
class ParsedComponent:
    """Complete parsed Aura component."""
    component_name: str
    body: list = field(default_factory=list)   # List[SourceNode]
    implements: list = field(default_factory=list)
    extends: str = ""
    extensible: bool = False
    abstract: bool = False
    controller: str = ""
    attributes: list = field(default_factory=list)          # List[AuraAttribute]
    handlers: list = field(default_factory=list)            # List[AuraHandler]
    registered_events: list = field(default_factory=list)   # List[AuraEvent]
    methods: list = field(default_factory=list)             # List[AuraMethod]
    facets: dict = field(default_factory=dict)              # {attribute: List[SourceNode]}
    expressions: list = field(default_factory=list)         # List[AuraExpression]
    dependencies: list = field(default_factory=list)

    def __repr__(self):
        return (f"ParsedComponent('{self.component_name}', {len(self.body)} body nodes, "
                f"{len(self.attributes)} attributes)")


# ── Side-channel records ─────────────────────────────────────────────

@dataclass
class DetectedGetter:
    """A hoisted expression the JS generator must expose as a getter."""
    name: str
    expression: str

    def to_dict(self) -> dict:
        return {"name": self.name, "expression": self.expression}


@dataclass
class LmsChannelConfig:
    """Lightning Message Service channel from <lightning:messageChannel>."""
    channel_name: str
    binding_id: str
    message_handler_name: Optional[str] = None
    scope: Optional[str] = None
    is_publisher_only: bool = True

    def to_dict(self) -> dict:
        return {
            "channelName": self.channel_name,
            "bindingId": self.binding_id,
            "messageHandlerName": self.message_handler_name,
            "scope": self.scope,
            "isPublisherOnly": self.is_publisher_only,
        }


@dataclass
class RecordDataConfig:
    """A <force:recordData> declaration to be replaced by @wire(getRecord)."""
    binding_id: str
    record_id_binding: str
    fields: list = field(default_factory=list)
    target_fields_binding: Optional[str] = None
    target_record_binding: Optional[str] = None
    target_error_binding: Optional[str] = None
    mode: str = "VIEW"

    def to_dict(self) -> dict:
        return {
            "bindingId": self.binding_id,
            "recordIdBinding": self.record_id_binding,
            "fields": list(self.fields),
            "targetFieldsBinding": self.target_fields_binding,
            "targetRecordBinding": self.target_record_binding,
            "targetErrorBinding": self.target_error_binding,
            "mode": self.mode,
        }


@dataclass
class FacetContent:
    """Content of an <aura:set> facet, rendered as LWC markup."""
    slot_name: str
    rendered_content: str

    def to_dict(self) -> dict:
        return {"slotName": self.slot_name, "renderedContent": self.rendered_content}


@dataclass
class TransformedMarkup:
    """Result of converting one component's markup."""
    template_text: str
    warnings: list = field(default_factory=list)
    used_directives: list = field(default_factory=list)
    used_components: list = field(default_factory=list)
    lms_channels: list = field(default_factory=list)          # List[LmsChannelConfig]
    record_data_services: list = field(default_factory=list)  # List[RecordDataConfig]
    facet_contents: list = field(default_factory=list)        # List[FacetContent]
    detected_getters: list = field(default_factory=list)      # List[DetectedGetter]

    def to_dict(self) -> dict:
        """Output contract for the downstream generators, camelCase keys."""
        return {
            "templateText": self.template_text,
            "warnings": list(self.warnings),
            "usedDirectives": list(self.used_directives),
            "usedComponents": list(self.used_components),
            "lmsChannels": [c.to_dict() for c in self.lms_channels],
            "recordDataServices": [r.to_dict() for r in self.record_data_services],
            "facetContents": [f.to_dict() for f in self.facet_contents],
            "detectedGetters": [g.to_dict() for g in self.detected_getters],
        }

    def __repr__(self):
        return (f"TransformedMarkup({len(self.template_text)} chars, "
                f"{len(self.warnings)} warnings, {len(self.detected_getters)} getters)")
