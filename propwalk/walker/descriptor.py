"""
Schema vocabulary for the property walker.

Every property a component needs is described by one descriptor dataclass. The
format is a closed set: each format gets its own class carrying only the fields
that make sense for it, so a Choice without options or a Compound without
children is caught when the schema is built or walked rather than halfway
through a prompt.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, Iterable, Iterator, List, Optional, Tuple

from propwalk.walker.errors import SchemaError


class PropertyFormat(Enum):
    BOOLEAN = "boolean"
    TEXT = "text"
    CHOICE = "choice"
    COMPOUND = "compound"

    @staticmethod
    def parse(value: str) -> "PropertyFormat":
        """
        Resolve a format name as written in a schema file.

        Args:
            value (str): Format name, case-insensitive. "string" is accepted for text.

        Returns:
            PropertyFormat: The matching member.

        Raises:
            SchemaError: If the name is missing or unknown.
        """
        if not isinstance(value, str) or not value:
            raise SchemaError(f"Missing property format: {value!r}")
        aliases = {"string": "text", "bool": "boolean", "complex": "compound"}
        name = aliases.get(value.lower(), value.lower())
        try:
            return PropertyFormat(name)
        except ValueError:
            raise SchemaError(f"Unrecognized property format: {value!r}") from None


def humanize(name: str) -> str:
    return name.replace("_", " ").strip().capitalize()


TRUE_STRINGS = {"true", "yes", "y", "1", "on"}


def as_bool(value: Any) -> bool:
    """Truth of a boolean default. Strings count as true only when they spell it ("yes", "true", ...)."""
    if isinstance(value, str):
        return value.strip().lower() in TRUE_STRINGS
    return bool(value)


@dataclass
class PropertyDescriptor:
    name: str
    label: str = ""
    description: str = ""
    required: bool = False
    multiple: bool = False
    cardinality: Optional[int] = None
    skip: bool = False
    internal: bool = False
    default: Any = None

    format: ClassVar[Optional[PropertyFormat]] = None

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name:
            raise SchemaError(f"Property name must be a non-empty string, got {self.name!r}")
        if not self.label:
            self.label = humanize(self.name)
        if self.cardinality == -1:
            self.cardinality = None
        if self.cardinality is not None:
            if isinstance(self.cardinality, bool) or not isinstance(self.cardinality, int) or self.cardinality < 1:
                raise SchemaError(f"Cardinality must be a positive integer or -1, got {self.cardinality!r}",
                                  property_name=self.name)

    def is_complex(self) -> bool:
        return self.format is PropertyFormat.COMPOUND

    def is_multiple(self) -> bool:
        return self.multiple

    def has_options(self) -> bool:
        return False

    def is_hidden(self) -> bool:
        return self.skip or self.internal


@dataclass
class BooleanProperty(PropertyDescriptor):
    format: ClassVar[PropertyFormat] = PropertyFormat.BOOLEAN

    def __post_init__(self):
        super().__post_init__()
        if self.multiple:
            raise SchemaError("Boolean properties cannot be multi-valued", property_name=self.name)


@dataclass
class TextProperty(PropertyDescriptor):
    format: ClassVar[PropertyFormat] = PropertyFormat.TEXT


@dataclass
class ChoiceProperty(PropertyDescriptor):
    """
    A property whose value is picked from an option set.

    `options` are listed to the user. `extra_options` are accepted as typed input
    but never listed, which keeps huge option sets (event names, hook names) usable.
    """

    options: Dict[str, str] = field(default_factory=dict)
    extra_options: Dict[str, str] = field(default_factory=dict)

    format: ClassVar[PropertyFormat] = PropertyFormat.CHOICE

    def __post_init__(self):
        super().__post_init__()
        self.options = {str(k): str(v) for k, v in (self.options or {}).items()}
        self.extra_options = {str(k): str(v) for k, v in (self.extra_options or {}).items()}

    def has_options(self) -> bool:
        return bool(self.options or self.extra_options)

    def all_options(self) -> Dict[str, str]:
        merged = dict(self.options)
        for key, label in self.extra_options.items():
            merged.setdefault(key, label)
        return merged

    def option_count(self) -> int:
        return len(self.all_options())


@dataclass
class CompoundProperty(PropertyDescriptor):
    """
    A property whose value is a list of nested schema instances. Compounds are
    repeatable unless `multiple` is switched off, in which case the value is a
    single nested instance.
    """

    multiple: bool = True
    children: List[PropertyDescriptor] = field(default_factory=list)

    format: ClassVar[PropertyFormat] = PropertyFormat.COMPOUND

    def __post_init__(self):
        super().__post_init__()
        self.children = list(self.children or [])
        seen = set()
        for child in self.children:
            if child.name in seen:
                raise SchemaError(f"Duplicate property name {child.name!r}", property_name=self.name)
            seen.add(child.name)

    def item_limit(self) -> Optional[int]:
        if not self.multiple:
            return 1
        return self.cardinality

    def child(self, name: str) -> PropertyDescriptor:
        for descriptor in self.children:
            if descriptor.name == name:
                return descriptor
        raise KeyError(f"{self.name} has no property {name!r}")

    def property_names(self) -> List[str]:
        return [descriptor.name for descriptor in self.children]

    def mark_hidden(self, names: Iterable[str], internal: bool = True) -> None:
        """
        Flag child properties so the walker fills them silently.

        Args:
            names (Iterable[str]): Child property names.
            internal (bool): Mark as internal (hidden from summaries too) rather than skip.

        Raises:
            KeyError: If a name is not a child of this compound.
        """
        for name in names:
            descriptor = self.child(name)
            if internal:
                descriptor.internal = True
            else:
                descriptor.skip = True

    def walk(self, path: Tuple[str, ...] = ()) -> Iterator[Tuple[Tuple[str, ...], PropertyDescriptor]]:
        for descriptor in self.children:
            child_path = path + (descriptor.name,)
            yield child_path, descriptor
            if isinstance(descriptor, CompoundProperty):
                yield from descriptor.walk(child_path)


FORMAT_CLASSES = {
    PropertyFormat.BOOLEAN: BooleanProperty,
    PropertyFormat.TEXT: TextProperty,
    PropertyFormat.CHOICE: ChoiceProperty,
    PropertyFormat.COMPOUND: CompoundProperty,
}
