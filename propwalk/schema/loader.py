"""
Builds descriptor trees from schema files.

A schema file (YAML, JSON or TOML) describes one component:

    name: module
    label: Module
    properties:
      - name: root_name
        label: Machine name
        format: text
        required: true
      - name: plugins
        format: compound
        cardinality: -1
        properties:
          - name: plugin_id
            format: text
            required: true

`properties` may also be a mapping of name -> property, in declared order.
"""

from pathlib import Path
from typing import Any, Dict, List

from loguru import logger as log

from propwalk.util.error_handling import check_types
from propwalk.util.fileio import FileIO
from propwalk.walker.descriptor import (ChoiceProperty, CompoundProperty, FORMAT_CLASSES, PropertyDescriptor,
                                        PropertyFormat)
from propwalk.walker.errors import SchemaError

COMMON_FIELDS = {
    "name": str,
    "label": str,
    "description": str,
    "required": bool,
    "multiple": bool,
    "cardinality": int,
    "skip": bool,
    "internal": bool,
}
KNOWN_KEYS = set(COMMON_FIELDS) | {"format", "default", "options", "options_extra", "properties"}


class SchemaLoader:
    @staticmethod
    def load(path: Path) -> CompoundProperty:
        """
        Reads a schema file and builds the root component descriptor.

        Args:
            path (Path): YAML, JSON or TOML schema file.

        Returns:
            CompoundProperty: The root component.

        Raises:
            FileNotFoundError: If the file does not exist.
            SchemaError: If the file content is not a valid schema.
        """
        try:
            data = FileIO.read(Path(path))
        except ValueError as e:
            raise SchemaError(str(e)) from e
        root = SchemaLoader.from_dict(data)
        log.debug("[SchemaLoader] Loaded schema {!r} from {}", root.name, path)
        return root

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> CompoundProperty:
        if not isinstance(data, dict):
            raise SchemaError(f"Schema root must be a mapping, got {type(data).__name__}")
        name = data.get("name", "component")
        return CompoundProperty(
            name=name,
            label=data.get("label", ""),
            description=data.get("description", ""),
            required=True,
            multiple=False,
            children=SchemaLoader._build_children(data.get("properties", []), parent=name),
        )

    @staticmethod
    def _build_children(properties: Any, parent: str) -> List[PropertyDescriptor]:
        if isinstance(properties, dict):
            items = []
            for name, info in properties.items():
                if not isinstance(info, dict):
                    raise SchemaError(f"Property definition must be a mapping, got {type(info).__name__}",
                                      property_name=name)
                items.append({"name": name, **info})
        elif isinstance(properties, list):
            items = properties
        else:
            raise SchemaError("'properties' must be a list or a mapping", property_name=parent)

        return [SchemaLoader.build_property(info) for info in items]

    @staticmethod
    def build_property(info: Dict[str, Any]) -> PropertyDescriptor:
        """
        Builds one descriptor from its mapping.

        Args:
            info (dict): Property definition with at least 'name' and 'format'.

        Returns:
            PropertyDescriptor: The descriptor subclass for the format.

        Raises:
            SchemaError: On an unknown format, wrong field types or invalid values.
        """
        if not isinstance(info, dict):
            raise SchemaError(f"Property definition must be a mapping, got {type(info).__name__}")
        name = info.get("name")
        if not isinstance(name, str) or not name:
            raise SchemaError(f"Property is missing a name: {info!r}")

        try:
            fmt = PropertyFormat.parse(info.get("format"))
        except SchemaError as e:
            raise SchemaError(str(e), property_name=name) from None

        unknown = set(info) - KNOWN_KEYS
        if unknown:
            log.warning("[SchemaLoader] {}: ignoring unknown keys {}", name, sorted(unknown))

        kwargs = {}
        for key, expected in COMMON_FIELDS.items():
            if key in info:
                try:
                    kwargs[key] = check_types(info[key], expected, label=key)
                except TypeError as e:
                    raise SchemaError(str(e), property_name=name) from None
        if "default" in info:
            kwargs["default"] = info["default"]

        if fmt is PropertyFormat.CHOICE:
            kwargs["options"] = SchemaLoader._options(info.get("options"), name)
            kwargs["extra_options"] = SchemaLoader._options(info.get("options_extra"), name)
        elif fmt is PropertyFormat.COMPOUND:
            kwargs["children"] = SchemaLoader._build_children(info.get("properties", []), parent=name)
        elif "options" in info:
            raise SchemaError(f"Options are only valid for choice properties, not {fmt.value}", property_name=name)

        return FORMAT_CLASSES[fmt](**kwargs)

    @staticmethod
    def _options(options: Any, name: str) -> Dict[str, str]:
        if options is None:
            return {}
        if isinstance(options, dict):
            return {str(k): str(v) for k, v in options.items()}
        if isinstance(options, list):
            return {str(k): str(k) for k in options}
        raise SchemaError(f"Options must be a mapping or a list, got {type(options).__name__}", property_name=name)

    @staticmethod
    def validate(root: CompoundProperty) -> CompoundProperty:
        """
        Checks a whole tree up front, so a broken schema fails before the first prompt.

        Raises:
            SchemaError: For the first Choice without options, or descriptor without a format.
        """
        for path, descriptor in root.walk():
            if not isinstance(descriptor.format, PropertyFormat):
                raise SchemaError("Missing property format", property_name=".".join(path))
            if isinstance(descriptor, ChoiceProperty) and not descriptor.has_options():
                raise SchemaError("Choice property has no options", property_name=".".join(path))
        return root


load = SchemaLoader.load
from_dict = SchemaLoader.from_dict
