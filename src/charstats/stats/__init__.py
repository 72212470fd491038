"""Attribute schema, modifiers and the stat engine."""

from .engine import AttributeState, StatEngine
from .errors import (
    InvalidRangeError,
    NullModifierError,
    SchemaLoadError,
    SchemaValidationError,
    StatsError,
    UnknownAttributeError,
)
from .events import AttributeChanged, ChangeChannel, ChangeHandler
from .modifiers import (
    ClampModifier,
    FlatModifier,
    FunctionModifier,
    Modifier,
    ModifierKind,
    MultiplyModifier,
    OverrideModifier,
    modifier_from_data,
)
from .schema import AttributeDefinition, AttributeSchema
from .schema_loader import (
    load_modifiers,
    load_schema,
    load_schema_from_directory,
)

__all__ = [
    "StatEngine",
    "AttributeState",
    "AttributeDefinition",
    "AttributeSchema",
    "AttributeChanged",
    "ChangeChannel",
    "ChangeHandler",
    "Modifier",
    "ModifierKind",
    "FlatModifier",
    "MultiplyModifier",
    "OverrideModifier",
    "ClampModifier",
    "FunctionModifier",
    "modifier_from_data",
    "load_schema",
    "load_schema_from_directory",
    "load_modifiers",
    "StatsError",
    "UnknownAttributeError",
    "InvalidRangeError",
    "NullModifierError",
    "SchemaLoadError",
    "SchemaValidationError",
]
