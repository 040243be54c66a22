from typing import Any, Dict, Optional

from jinja2 import Environment, StrictUndefined, TemplateError, Undefined

from propwalk.walker.descriptor import PropertyDescriptor, PropertyFormat, as_bool
from propwalk.walker.errors import SchemaError


class TemplateDefaults:
    """
    Default resolver backed by the schema's declared defaults.

    String defaults are jinja2 templates rendered against the values already
    collected at the same level, so `default: "{{ root_name }}_block"` follows
    whatever the user typed for `root_name`. Lists are rendered item by item.

    Args:
        context (dict, optional): Extra template variables, shadowed by sibling values.
        strict (bool): Fail on undefined template variables instead of rendering them empty.
    """

    def __init__(self, context: Optional[Dict[str, Any]] = None, strict: bool = False):
        self.context = dict(context or {})
        self.env = Environment(
            autoescape=False,
            keep_trailing_newline=True,
            undefined=StrictUndefined if strict else Undefined,
        )

    def __call__(self, descriptor: PropertyDescriptor, siblings: Dict[str, Any]) -> Any:
        if descriptor.default is None:
            return self.empty(descriptor)

        variables = {**self.context, **siblings}
        value = self._render(descriptor.default, variables, descriptor.name)

        if descriptor.format is PropertyFormat.BOOLEAN and isinstance(value, str):
            return as_bool(value)
        if descriptor.is_multiple() and not descriptor.is_complex() and not isinstance(value, list):
            return [value] if value != "" else []
        return value

    @staticmethod
    def empty(descriptor: PropertyDescriptor) -> Any:
        if descriptor.format is PropertyFormat.BOOLEAN:
            return False
        if descriptor.is_multiple():
            return []
        if descriptor.is_complex():
            return None
        return ""

    def _render(self, value: Any, variables: Dict[str, Any], name: str) -> Any:
        if isinstance(value, str):
            if "{" not in value:
                return value
            try:
                return self.env.from_string(value).render(**variables)
            except TemplateError as e:
                raise SchemaError(f"Cannot render default {value!r}: {e}", property_name=name) from e
        if isinstance(value, list):
            return [self._render(item, variables, name) for item in value]
        if isinstance(value, dict):
            return {k: self._render(v, variables, name) for k, v in value.items()}
        return value
