"""
Component-type selection, done before the walk starts.

The root of a schema is the component being built. Its compound properties are
subcomponents (plugins, services, ...) the user can choose to add. Whatever was
not chosen is marked internal so the walker fills it silently; what was chosen
is passed to the walker as preselected and is not confirmed again.
"""

from typing import Any, Dict, Iterable, List, Mapping

from loguru import logger as log

from propwalk.walker.descriptor import CompoundProperty
from propwalk.walker.values import ValueTree

# Choice meaning "just the component itself, no subcomponents".
COMPONENT_ONLY = "module"


def subcomponent_names(root: CompoundProperty) -> List[str]:
    return [descriptor.name for descriptor in root.children if descriptor.is_complex()]


def component_options(root: CompoundProperty, existing: bool = False) -> Dict[str, str]:
    """
    Options for the initial "what do you want to build" question.

    Args:
        root (CompoundProperty): The component schema.
        existing (bool): Whether the component already exists. A new component
            can be built on its own; an existing one only gains subcomponents.

    Returns:
        dict: key -> label, COMPONENT_ONLY first for a new component.
    """
    options = {} if existing else {COMPONENT_ONLY: f"{root.label} only"}
    for name in subcomponent_names(root):
        if not root.child(name).internal:
            options[name] = root.child(name).label
    return options


def select_components(root: CompoundProperty, chosen: Iterable[str], existing: bool = False) -> List[str]:
    """
    Hide everything the user did not ask for.

    Args:
        root (CompoundProperty): The component schema; flags are set in place.
        chosen (Iterable[str]): Chosen component types (subcomponent names or COMPONENT_ONLY).
        existing (bool): Whether the component already exists, in which case its own
            non-subcomponent properties are not asked again.

    Returns:
        list[str]: Chosen subcomponent names, in schema order.

    Raises:
        ValueError: If a chosen name is not a subcomponent of the root.
    """
    chosen = list(chosen)
    subcomponents = subcomponent_names(root)
    unknown = [name for name in chosen if name != COMPONENT_ONLY and name not in subcomponents]
    if unknown:
        raise ValueError(f"Unknown component type(s): {', '.join(unknown)}. "
                         f"Valid: {', '.join([COMPONENT_ONLY] + subcomponents)}")

    if set(chosen) <= {COMPONENT_ONLY}:
        hidden = list(subcomponents)
    else:
        hidden = [name for name in root.property_names() if name not in subcomponents] if existing else []
        hidden += [name for name in subcomponents if name not in chosen]

    root.mark_hidden(hidden, internal=True)
    log.debug("[components] Chosen {}; hidden {}", chosen, hidden)
    return [name for name in subcomponents if name in chosen]


def preset_values(root: CompoundProperty, values: Dict[str, Any]) -> None:
    """
    Fix root-level values the caller already knows (e.g. the component's machine
    name given on the command line). They become internal defaults.

    Raises:
        KeyError: If a name is not a root-level property.
    """
    for name, value in values.items():
        descriptor = root.child(name)
        descriptor.default = value
        descriptor.internal = True


def strip_internal(values: Mapping[str, Any], schema: CompoundProperty) -> Dict[str, Any]:
    """
    Plain copy of a ValueTree without internal properties, at every level.

    Args:
        values (Mapping): Values collected for `schema`.
        schema (CompoundProperty): The schema the values were collected for.

    Returns:
        dict: Plain nested data for summaries.
    """
    summary = {}
    for descriptor in schema.children:
        if descriptor.internal or descriptor.name not in values:
            continue
        value = values[descriptor.name]
        if isinstance(descriptor, CompoundProperty):
            if isinstance(value, list):
                value = [strip_internal(item, descriptor) for item in value]
            elif isinstance(value, Mapping):
                value = strip_internal(value, descriptor)
        elif isinstance(value, ValueTree):
            value = value.to_dict()
        summary[descriptor.name] = value
    return summary
