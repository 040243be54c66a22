"""
Interactive, schema-driven property walker.

Exposes the descriptor model, the prompt contract, the breadcrumb tracker, the
traversal engine and the ValueTree it produces.
"""

from propwalk.walker.breadcrumb import BreadcrumbTracker
from propwalk.walker.descriptor import (BooleanProperty, ChoiceProperty, CompoundProperty, PropertyDescriptor,
                                        PropertyFormat, TextProperty)
from propwalk.walker.engine import SEARCH_THRESHOLD, TraversalEngine, match_options
from propwalk.walker.errors import AbortedSession, AdapterValidationError, SchemaError, WalkerError
from propwalk.walker.prompt import NONE_OPTION, PromptAdapter
from propwalk.walker.values import ValueTree

__all__ = [
    "AbortedSession",
    "AdapterValidationError",
    "BooleanProperty",
    "BreadcrumbTracker",
    "ChoiceProperty",
    "CompoundProperty",
    "NONE_OPTION",
    "PromptAdapter",
    "PropertyDescriptor",
    "PropertyFormat",
    "SEARCH_THRESHOLD",
    "SchemaError",
    "TextProperty",
    "TraversalEngine",
    "ValueTree",
    "WalkerError",
    "match_options",
]
