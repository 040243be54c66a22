import pytest

from propwalk.walker import (AbortedSession, BooleanProperty, ChoiceProperty, CompoundProperty, PropertyDescriptor,
                             SchemaError, TextProperty, TraversalEngine, match_options)
from propwalk.walker.adapters import DEFAULT, ScriptedPromptAdapter


def numbered_options(count):
    return {f"opt_{i}": f"Option {i}" for i in range(count)}


##END TO END##

def test_required_boolean(walk):
    values, _ = walk([BooleanProperty(name="enable_caching", required=True)], True)
    assert values == {"enable_caching": True}


def test_declined_optional_compound_is_empty_list(walk, plugins_schema):
    values, adapter = walk(plugins_schema, False)
    assert values == {"plugins": []}
    assert adapter.labels("confirm") == ["Enter details for Plugins?"]


def test_two_plugin_items(walk, plugins_schema):
    values, adapter = walk(plugins_schema, True, "alpha", True, "beta", False)
    assert values.to_dict() == {"plugins": [{"plugin_id": "alpha"}, {"plugin_id": "beta"}]}
    assert adapter.remaining == 0


def test_optional_choice_none_is_empty_string(walk):
    schema = [ChoiceProperty(name="license", options={"mit": "MIT", "gpl": "GPL", "bsd": "BSD"})]
    values, adapter = walk(schema, "none")
    assert values == {"license": ""}
    assert adapter.methods() == ["select_one"]


##COMPOUNDS##

@pytest.mark.parametrize("more", [0, 1, 3])
def test_each_yes_adds_one_item(walk, plugins_schema, more):
    answers = [True]
    for i in range(more + 1):
        answers += [f"p{i}", i < more]
    values, _ = walk(plugins_schema, *answers)
    assert [item["plugin_id"] for item in values["plugins"]] == [f"p{i}" for i in range(more + 1)]


def test_cardinality_stops_loop_without_asking(walk):
    schema = [CompoundProperty(
        name="items", required=True, cardinality=2,
        children=[TextProperty(name="value", required=True)],
    )]
    values, adapter = walk(schema, "a", True, "b")
    assert len(values["items"]) == 2
    assert adapter.labels("confirm") == ["Enter more Items?"]
    assert adapter.messages[0] == "Enter details for Items (at least one required):"


def test_required_compound_never_confirms(walk):
    schema = [CompoundProperty(name="items", required=True, children=[TextProperty(name="value")])]
    values, adapter = walk(schema, "a", False)
    assert values.to_dict() == {"items": [{"value": "a"}]}
    assert adapter.labels("confirm") == ["Enter more Items?"]


def test_single_compound_stores_one_tree(walk):
    schema = [CompoundProperty(name="info", multiple=False, children=[TextProperty(name="title")])]
    values, adapter = walk(schema, True, "Hello")
    assert values.to_dict() == {"info": {"title": "Hello"}}
    assert "Enter more Info?" not in adapter.labels()


def test_declined_single_compound_is_omitted(walk):
    schema = [
        CompoundProperty(name="info", multiple=False, children=[TextProperty(name="title")]),
        TextProperty(name="after"),
    ]
    values, _ = walk(schema, False, "x", resolver=lambda d, s: {"title": "from resolver"})
    assert "info" not in values
    assert values["after"] == "x"


def test_decline_wins_over_default(walk, plugins_schema):
    resolver = lambda descriptor, siblings: [{"plugin_id": "preset"}]
    values, _ = walk(plugins_schema, False, resolver=resolver)
    assert values["plugins"] == []


def test_preselected_root_compound_not_confirmed(component_schema):
    adapter = ScriptedPromptAdapter(["mymod", DEFAULT, "stable", "p1", False, False, False])
    values = TraversalEngine(adapter).walk(component_schema, preselected=["plugins"])
    assert "Enter details for Plugins?" not in adapter.labels("confirm")
    assert "Enter details for Services?" in adapter.labels("confirm")
    assert values["plugins"][0] == {"plugin_id": "p1", "cache": False}
    assert values["services"] == []


def test_item_trees_are_frozen(walk, plugins_schema):
    values, _ = walk(plugins_schema, True, "alpha", False)
    assert values.frozen
    assert values["plugins"][0].frozen


##HIDDEN PROPERTIES##

def test_skip_and_internal_are_never_prompted(walk):
    calls = []

    def resolver(descriptor, siblings):
        calls.append(descriptor.name)
        return {"hidden_text": "computed", "hidden_list": ["a", "b"]}.get(descriptor.name)

    schema = [
        TextProperty(name="hidden_text", skip=True),
        TextProperty(name="hidden_list", multiple=True, internal=True),
        TextProperty(name="asked"),
    ]
    values, adapter = walk(schema, "typed", resolver=resolver)
    assert values == {"hidden_text": "computed", "hidden_list": ["a", "b"], "asked": "typed"}
    assert adapter.labels() == ["Enter the Asked"]
    assert calls == ["hidden_text", "hidden_list", "asked"]


def test_hidden_compound_filled_silently(walk, plugins_schema):
    plugins_schema[0].internal = True
    values, adapter = walk(plugins_schema, resolver=lambda d, s: [{"plugin_id": "x"}])
    assert values["plugins"] == [{"plugin_id": "x"}]
    assert adapter.calls == []


def test_resolver_sees_siblings(walk):
    seen = {}

    def resolver(descriptor, siblings):
        seen[descriptor.name] = dict(siblings)
        return f"{siblings.get('root_name', '')}_block"

    schema = [TextProperty(name="root_name", required=True), TextProperty(name="block_id")]
    values, _ = walk(schema, "shop", DEFAULT, resolver=resolver)
    assert seen["block_id"] == {"root_name": "shop"}
    assert values["block_id"] == "shop_block"


##LEAVES##

def test_boolean_default_from_resolver(walk):
    values, adapter = walk([BooleanProperty(name="cache")], DEFAULT, resolver=lambda d, s: True)
    assert values == {"cache": True}
    assert adapter.labels() == ["Do you want Cache?"]


@pytest.mark.parametrize("resolved, expected", [("false", False), ("no", False), ("0", False), ("yes", True), ("True", True)])
def test_boolean_string_default(walk, resolved, expected):
    values, _ = walk([BooleanProperty(name="cache")], DEFAULT, resolver=lambda d, s: resolved)
    assert values == {"cache": expected}


def test_text_defaults_normalised(walk):
    schema = [TextProperty(name="empty"), TextProperty(name="joined")]
    resolver = lambda descriptor, siblings: [] if descriptor.name == "empty" else ["a", "b"]
    values, _ = walk(schema, DEFAULT, DEFAULT, resolver=resolver)
    assert values == {"empty": "", "joined": "a, b"}


def test_required_text_rejects_empty(walk):
    values, _ = walk([TextProperty(name="root_name", required=True)], "", "shop")
    assert values == {"root_name": "shop"}


def test_text_list(walk):
    schema = [TextProperty(name="dependencies", multiple=True)]
    values, adapter = walk(schema, ["node", "views"])
    assert values == {"dependencies": ["node", "views"]}
    assert adapter.labels() == ["Enter the Dependencies, one per line, empty line to finish"]


def test_text_list_default(walk):
    schema = [TextProperty(name="dependencies", multiple=True)]
    values, _ = walk(schema, DEFAULT, resolver=lambda d, s: "node")
    assert values == {"dependencies": ["node"]}


def test_text_list_cardinality(walk):
    schema = [TextProperty(name="tags", multiple=True, cardinality=2)]
    values, _ = walk(schema, ["a", "b", "c"], ["a", "b"])
    assert values == {"tags": ["a", "b"]}


def test_multi_choice_in_option_order(walk):
    schema = [ChoiceProperty(name="hooks", multiple=True, options={"a": "A", "b": "B", "c": "C"})]
    values, adapter = walk(schema, ["c", "a", "c"])
    assert values == {"hooks": ["a", "c"]}
    assert adapter.methods() == ["select_many"]


def test_multi_choice_cardinality(walk):
    schema = [ChoiceProperty(name="hooks", multiple=True, cardinality=1, options={"a": "A", "b": "B"})]
    values, _ = walk(schema, ["a", "b"], ["b"])
    assert values == {"hooks": ["b"]}


def test_required_choice_drops_unknown_default(walk):
    schema = [ChoiceProperty(name="base", required=True, options={"a": "A", "b": "B"})]
    values, adapter = walk(schema, DEFAULT, "b", resolver=lambda d, s: "zzz")
    assert values == {"base": "b"}
    assert adapter.labels() == ["Enter the Base"]


def test_optional_choice_default_is_none(walk):
    schema = [ChoiceProperty(name="base", options={"a": "A"})]
    values, _ = walk(schema, DEFAULT)
    assert values == {"base": ""}


def test_optional_choice_list_default(walk):
    schema = [ChoiceProperty(name="base", options={"a": "A", "b": "B"})]
    values, _ = walk(schema, "a", resolver=lambda d, s: [])
    assert values == {"base": "a"}
    values, _ = walk(schema, DEFAULT, resolver=lambda d, s: [])
    assert values == {"base": ""}


def test_required_choice_list_default(walk):
    schema = [ChoiceProperty(name="base", required=True, options={"a": "A", "b": "B"})]
    values, adapter = walk(schema, DEFAULT, "b", resolver=lambda d, s: ["a"])
    assert values == {"base": "b"}
    assert adapter.remaining == 0


def test_required_multi_choice_rejects_empty(walk):
    schema = [ChoiceProperty(name="hooks", required=True, multiple=True, options={"a": "A", "b": "B"})]
    values, adapter = walk(schema, [], ["a"])
    assert values == {"hooks": ["a"]}
    assert adapter.remaining == 0


def test_required_text_list_rejects_empty(walk):
    schema = [TextProperty(name="dependencies", required=True, multiple=True)]
    values, adapter = walk(schema, [], DEFAULT, ["x"])
    assert values == {"dependencies": ["x"]}
    assert adapter.remaining == 0


def test_required_search_many_rejects_empty(walk):
    schema = [ChoiceProperty(name="events", required=True, multiple=True, options=numbered_options(30))]
    values, adapter = walk(schema, [], ["opt_1"])
    assert values == {"events": ["opt_1"]}
    assert adapter.methods() == ["search_many"]


def test_extra_options_accepted_and_announced(walk):
    schema = [ChoiceProperty(name="event", description="Pick one", options={"a": "A"}, extra_options={"b": "B"})]
    values, adapter = walk(schema, "b")
    assert values == {"event": "b"}
    assert adapter.labels() == ["Enter the Event\n (Pick one)\n (Additional options available in autocompletion.)"]


@pytest.mark.parametrize("count, method", [(20, "select_one"), (21, "search_one")])
def test_search_threshold(walk, count, method):
    schema = [ChoiceProperty(name="event", required=True, options=numbered_options(count))]
    values, adapter = walk(schema, "opt_3")
    assert values == {"event": "opt_3"}
    assert adapter.methods() == [method]


def test_threshold_counts_extra_options(walk):
    schema = [ChoiceProperty(name="event", required=True, options=numbered_options(15),
                             extra_options={f"more_{i}": str(i) for i in range(6)})]
    _, adapter = walk(schema, "more_5")
    assert adapter.methods() == ["search_one"]


def test_configured_threshold(walk):
    schema = [ChoiceProperty(name="event", required=True, options=numbered_options(3))]
    _, adapter = walk(schema, "opt_1", search_threshold=2)
    assert adapter.methods() == ["search_one"]


def test_search_optional_none(walk):
    schema = [ChoiceProperty(name="event", options=numbered_options(30))]
    values, _ = walk(schema, "none")
    assert values == {"event": ""}


def test_search_many(walk):
    schema = [ChoiceProperty(name="events", multiple=True, options=numbered_options(30))]
    values, adapter = walk(schema, ["opt_1", "opt_2"])
    assert values == {"events": ["opt_1", "opt_2"]}
    assert adapter.methods() == ["search_many"]


@pytest.mark.parametrize("query, expected", [
    ("kernel_request", ["kernel.request"]),
    ("kernel.resp", ["kernel_response"]),
    ("KERNEL", ["kernel.request", "kernel_response"]),
    ("a+b", []),
])
def test_match_options(query, expected):
    options = {"kernel.request": "Request", "kernel_response": "Response", "other": "Other"}
    assert list(match_options(options, query)) == expected


##BREADCRUMBS##

def test_breadcrumb_suppressed_at_root_and_shown_for_items(component_schema):
    adapter = ScriptedPromptAdapter(["mymod", DEFAULT, "none", True, "p1", False, True, "p2", False, False, False])
    TraversalEngine(adapter).walk(component_schema)
    crumbs = [m for m in adapter.messages if m.startswith("Current item")]
    assert crumbs == [
        "Current item: Module » Plugins » Item 1",
        "Current item: Module » Plugins » Item 2",
    ]


def test_back_to_after_nested_compound():
    root = CompoundProperty(name="module", label="Module", children=[
        CompoundProperty(name="info", label="Info", required=True, multiple=False, children=[
            CompoundProperty(name="settings", label="Settings", required=True, multiple=False,
                             children=[BooleanProperty(name="flag")]),
            TextProperty(name="title"),
        ]),
    ])
    adapter = ScriptedPromptAdapter([True, "x"])
    values = TraversalEngine(adapter).walk(root)
    assert values.to_dict() == {"info": {"settings": {"flag": True}, "title": "x"}}
    assert adapter.messages == [
        "Enter details for Info (at least one required):",
        "Current item: Module » Info",
        "Enter details for Settings (at least one required):",
        "Current item: Module » Info » Settings",
        "Back to: Module » Info",
    ]


def test_custom_separator(plugins_schema):
    root = CompoundProperty(name="module", label="Module", children=plugins_schema)
    adapter = ScriptedPromptAdapter([True, "alpha", False])
    TraversalEngine(adapter, separator=" / ").walk(root)
    assert "Current item: Module / Plugins / Item 1" in adapter.messages


##ERRORS##

def test_choice_without_options(walk):
    with pytest.raises(SchemaError) as e:
        walk([ChoiceProperty(name="event", required=True)], "x")
    assert e.value.property_name == "event"


def test_descriptor_without_format(walk):
    class Untyped(PropertyDescriptor):
        pass

    with pytest.raises(SchemaError) as e:
        walk([Untyped(name="mystery")], "x")
    assert e.value.property_name == "mystery"


def test_aborted_session_propagates(walk, plugins_schema):
    with pytest.raises(AbortedSession):
        walk(plugins_schema, True, "alpha", True)
