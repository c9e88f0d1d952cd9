"""
Data types shared by every stage: template nodes, concepts, component
metadata and extension metadata.
"""

from .component import (
    ComponentDefinition,
    ComponentOptions,
    ComponentProperties,
    ImportDefinition,
    ImportInput,
    PartialComponentProperties,
)
from .concepts import (
    AttributeConcept,
    CommentConcept,
    ComponentConcept,
    ConditionalConcept,
    ElementConcept,
    EventConcept,
    FragmentConcept,
    IterationConcept,
    SlotConcept,
    StructuralConcept,
    StyleExtensionEntry,
    StylingConcept,
    TextConcept,
)
from .extension import (
    SUPPORTED_FRAMEWORKS,
    ExtensionMetadata,
    Framework,
    validate_extension_metadata,
)
from .template import (
    CommentNode,
    ElementNode,
    ForNode,
    FragmentNode,
    IfNode,
    SlotNode,
    TemplateNode,
    TextNode,
    UnknownNode,
    parse_node,
    parse_template,
)
from .validation import (
    ValidationResult,
    ValidationSeverity,
    ValidationSuggestion,
    ValidationWarning,
)

__all__ = [
    "SUPPORTED_FRAMEWORKS",
    "AttributeConcept",
    "CommentConcept",
    "CommentNode",
    "ComponentConcept",
    "ComponentDefinition",
    "ComponentOptions",
    "ComponentProperties",
    "ConditionalConcept",
    "ElementConcept",
    "ElementNode",
    "EventConcept",
    "ExtensionMetadata",
    "ForNode",
    "Framework",
    "FragmentConcept",
    "FragmentNode",
    "IfNode",
    "ImportDefinition",
    "ImportInput",
    "IterationConcept",
    "PartialComponentProperties",
    "SlotConcept",
    "SlotNode",
    "StructuralConcept",
    "StyleExtensionEntry",
    "StylingConcept",
    "TemplateNode",
    "TextConcept",
    "TextNode",
    "UnknownNode",
    "ValidationResult",
    "ValidationSeverity",
    "ValidationSuggestion",
    "ValidationWarning",
    "parse_node",
    "parse_template",
    "validate_extension_metadata",
]
