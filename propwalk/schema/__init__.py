from propwalk.schema.components import (COMPONENT_ONLY, component_options, preset_values, select_components,
                                        strip_internal,
                                        subcomponent_names)
from propwalk.schema.defaults import TemplateDefaults
from propwalk.schema.loader import SchemaLoader

__all__ = [
    "COMPONENT_ONLY",
    "SchemaLoader",
    "TemplateDefaults",
    "component_options",
    "preset_values",
    "select_components",
    "strip_internal",
    "subcomponent_names",
]
