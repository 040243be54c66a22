"""
Recursive property walker.

TraversalEngine walks a schema depth-first, one frame per schema level: the root
call, and one recursive call per item of a compound property. Each frame builds
its own ValueTree, freezes it and returns it to the parent frame, which stores
it by value. The breadcrumb tracker is the only state shared between frames and
it belongs to a single walk.
"""

import re
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Union

from loguru import logger as log

from propwalk.walker.breadcrumb import DEFAULT_SEPARATOR, BreadcrumbTracker
from propwalk.walker.descriptor import (ChoiceProperty, CompoundProperty, PropertyDescriptor, as_bool,
                                        PropertyFormat)
from propwalk.walker.errors import SchemaError
from propwalk.walker.prompt import (NONE_LABEL, NONE_OPTION, OptionsProvider, PromptAdapter,
                                    is_none_choice, with_none_option)
from propwalk.walker.values import ValueTree

# Option sets larger than this are searched rather than listed.
SEARCH_THRESHOLD = 20

DefaultResolver = Callable[[PropertyDescriptor, Dict[str, Any]], Any]


def declared_default(descriptor: PropertyDescriptor, siblings: Dict[str, Any]) -> Any:
    return descriptor.default


def match_options(options: Dict[str, str], query: str) -> Dict[str, str]:
    """
    Filter options whose key contains the query.

    Matching is case-insensitive and treats "_" and "." as the same character,
    so "kernel_request" finds "kernel.request".

    Args:
        options (dict): key -> label.
        query (str): Text typed so far.

    Returns:
        dict: Matching options, in their original order.
    """
    # "_" first: the class inserted for it contains a bare ".", which the
    # second replacement must not touch.
    pattern = re.escape(query or "").replace("_", "[._]").replace("\\.", "[._]")
    regex = re.compile(pattern, re.IGNORECASE)
    return {key: label for key, label in options.items() if regex.search(key)}


class TraversalEngine:
    """
    Collects a ValueTree for a schema by asking a PromptAdapter.

    Args:
        adapter (PromptAdapter): Where questions go.
        resolve_default (Callable, optional): (descriptor, sibling values) -> default.
            Called once per leaf visit and once per skipped/internal property.
            Defaults to the descriptor's declared default.
        search_threshold (int): Option count above which a choice is searched.
        separator (str): Breadcrumb separator.
    """

    def __init__(
            self,
            adapter: PromptAdapter,
            resolve_default: Optional[DefaultResolver] = None,
            search_threshold: int = SEARCH_THRESHOLD,
            separator: str = DEFAULT_SEPARATOR,
    ):
        self.adapter = adapter
        self.resolve_default = resolve_default or declared_default
        self.search_threshold = search_threshold
        self.separator = separator

    def walk(
            self,
            schema: Union[CompoundProperty, Sequence[PropertyDescriptor]],
            label: Optional[str] = None,
            preselected: Iterable[str] = (),
    ) -> ValueTree:
        """
        Walk a whole schema and return the collected values.

        Args:
            schema (CompoundProperty | Sequence[PropertyDescriptor]): The root
                component, or its properties directly.
            label (str, optional): Root breadcrumb label. Defaults to the root label.
            preselected (Iterable[str]): Root-level compound properties the user has
                already asked for; they are not confirmed again.

        Returns:
            ValueTree: Frozen tree keyed by property name.

        Raises:
            SchemaError: A descriptor cannot be walked.
            AbortedSession: The user cancelled. No tree is produced.
        """
        if isinstance(schema, CompoundProperty):
            properties = schema.children
            label = label or schema.label
        else:
            properties = list(schema)
            label = label or ""

        tracker = BreadcrumbTracker(display=self.adapter.message, separator=self.separator)
        tracker.push(label)
        log.debug("[walk] Starting walk of {!r} ({} properties)", label, len(properties))
        values = self._visit(properties, tracker, requested=frozenset(preselected))
        log.info("[walk] Collected {} values for {!r}", len(values), label)
        return values

    # ─── Frames ────────────────────────────────────────────────────────────────

    def _visit(self, properties: Sequence[PropertyDescriptor], tracker: BreadcrumbTracker,
               requested: frozenset = frozenset()) -> ValueTree:
        values = ValueTree()
        tracker.enter_level()

        for descriptor in properties:
            fmt = self._check_format(descriptor)

            if descriptor.is_hidden():
                values.set(descriptor.name, self._resolve(descriptor, values))
                log.debug("[walk] {} filled silently", descriptor.name)
                continue

            tracker.reorient()
            log.debug("[walk] Visiting {} ({}) at depth {}", descriptor.name, fmt.value, tracker.depth)

            if fmt is PropertyFormat.COMPOUND:
                self._visit_compound(descriptor, values, tracker, descriptor.name in requested)
            else:
                values.set(descriptor.name, self._visit_leaf(descriptor, values))

        return values.freeze()

    def _visit_compound(self, descriptor: CompoundProperty, values: ValueTree, tracker: BreadcrumbTracker,
                        requested: bool) -> None:
        if descriptor.required or requested:
            self.adapter.message(f"Enter details for {descriptor.label} (at least one required):")
        elif not self.adapter.confirm(f"Enter details for {descriptor.label}?", False):
            # Refusal wins over anything the resolver would have supplied.
            if descriptor.is_multiple():
                values.set(descriptor.name, [])
            else:
                values.discard(descriptor.name)
            return

        limit = descriptor.item_limit()
        items: List[ValueTree] = []

        with tracker.nested(descriptor.label):
            while True:
                if limit == 1:
                    item = self._visit(descriptor.children, tracker)
                else:
                    with tracker.nested(f"Item {len(items) + 1}"):
                        item = self._visit(descriptor.children, tracker)
                items.append(item)

                if limit is not None and len(items) >= limit:
                    break
                if not self.adapter.confirm(f"Enter more {descriptor.label}?", False):
                    break

        log.debug("[walk] {} collected {} item(s)", descriptor.name, len(items))
        values.set(descriptor.name, items if descriptor.is_multiple() else items[0])

    # ─── Leaves ────────────────────────────────────────────────────────────────

    def _visit_leaf(self, descriptor: PropertyDescriptor, values: ValueTree) -> Any:
        default = self._resolve(descriptor, values)
        fmt = descriptor.format

        if fmt is PropertyFormat.BOOLEAN:
            return bool(self.adapter.confirm(self._question("Do you want {label}?", descriptor), as_bool(default)))

        if fmt is PropertyFormat.CHOICE:
            return self._ask_choice(descriptor, default)

        if descriptor.is_multiple():
            lines = self.adapter.text_list(
                self._question("Enter the {label}, one per line, empty line to finish", descriptor),
                default=self._list_default(default),
                limit=descriptor.cardinality,
                required=descriptor.required,
            )
            return self._limited([line for line in lines if line], descriptor)

        answer = self.adapter.text(
            self._question("Enter the {label}", descriptor),
            default=self._text_default(default),
            required=descriptor.required,
        )
        return answer if answer is not None else ""

    def _ask_choice(self, descriptor: ChoiceProperty, default: Any) -> Any:
        if not descriptor.has_options():
            raise SchemaError("Choice property has no options", property_name=descriptor.name)

        every_option = descriptor.all_options()

        if descriptor.option_count() > self.search_threshold:
            if descriptor.is_multiple():
                keys = self.adapter.search_many(
                    self._question("Enter the {label}", descriptor),
                    self._options_provider(descriptor, with_none=False),
                    limit=descriptor.cardinality,
                    required=descriptor.required,
                )
                return self._limited([k for k in keys if k], descriptor)

            key = self.adapter.search_one(
                self._question("Enter the {label}", descriptor),
                self._options_provider(descriptor, with_none=not descriptor.required),
                required=descriptor.required,
            )
            return "" if is_none_choice(key) else key

        extra = descriptor.extra_options or None
        # Only a string can name an option; lists or mappings from a resolver are dropped.
        key_default = default if isinstance(default, str) else None

        if descriptor.is_multiple():
            keys = self.adapter.select_many(
                self._question("Enter the {label}", descriptor),
                descriptor.options,
                default=[k for k in self._list_default(default) if k in every_option],
                extra=extra,
                limit=descriptor.cardinality,
                required=descriptor.required,
            )
            return self._limited([k for k in keys if k], descriptor)

        if descriptor.required:
            options = descriptor.options
            default_key = key_default if key_default in every_option else None
        else:
            options = with_none_option(descriptor.options)
            default_key = key_default if key_default in every_option else NONE_OPTION

        key = self.adapter.select_one(
            self._question("Enter the {label}", descriptor), options, default=default_key, extra=extra,
        )
        return "" if is_none_choice(key) else key

    def _options_provider(self, descriptor: ChoiceProperty, with_none: bool) -> OptionsProvider:
        every_option = descriptor.all_options()

        def provider(query: str) -> Dict[str, str]:
            results = {NONE_OPTION: f"-- {NONE_LABEL} --"} if with_none else {}
            for key, label in match_options(every_option, query).items():
                results[key] = f"{key} - {label}"
            return results

        return provider

    # ─── Helpers ───────────────────────────────────────────────────────────────

    def _resolve(self, descriptor: PropertyDescriptor, values: ValueTree) -> Any:
        return self.resolve_default(descriptor, values.snapshot())

    @staticmethod
    def _check_format(descriptor: PropertyDescriptor) -> PropertyFormat:
        fmt = getattr(descriptor, "format", None)
        if not isinstance(fmt, PropertyFormat):
            raise SchemaError(f"Unrecognized property format: {fmt!r}",
                              property_name=getattr(descriptor, "name", None))
        if fmt is PropertyFormat.COMPOUND and not isinstance(descriptor, CompoundProperty):
            raise SchemaError("Compound property has no child schema", property_name=descriptor.name)
        return fmt

    @staticmethod
    def _question(template: str, descriptor: PropertyDescriptor) -> str:
        question = template.format(label=descriptor.label)
        if descriptor.description:
            question += f"\n ({descriptor.description})"
        if getattr(descriptor, "extra_options", None):
            question += "\n (Additional options available in autocompletion.)"
        return question

    @staticmethod
    def _text_default(default: Any) -> str:
        if default is None or default == []:
            return ""
        if isinstance(default, (list, tuple)):
            return ", ".join(str(item) for item in default)
        return str(default)

    @staticmethod
    def _list_default(default: Any) -> List[str]:
        if default is None or default == "":
            return []
        if isinstance(default, (list, tuple, set)):
            return [str(item) for item in default]
        return [str(default)]

    @staticmethod
    def _limited(items: List[Any], descriptor: PropertyDescriptor) -> List[Any]:
        if descriptor.cardinality is None:
            return items
        return items[:descriptor.cardinality]
