import pytest
import yaml

from propwalk.context.logger import Logger
from propwalk.walker import (BooleanProperty, ChoiceProperty, CompoundProperty, TextProperty,
                             TraversalEngine)
from propwalk.walker.adapters import ScriptedPromptAdapter


@pytest.fixture(autouse=True)
def clean_logger():
    """
    Every test starts and ends with an unconfigured Logger, so CLI tests can
    call init_logger() again and file sinks never leak between tmp dirs.
    """
    Logger.reset()
    yield
    Logger.reset()


@pytest.fixture
def scripted():
    """
    Factory for scripted adapters.

    Example:
        def test_walk(scripted):
            adapter = scripted(True, "alpha")
    """
    def _make(*answers):
        return ScriptedPromptAdapter(list(answers))
    return _make


@pytest.fixture
def walk(scripted):
    """
    Walks a schema with scripted answers and returns (values, adapter).

    Example:
        def test_flag(walk):
            values, adapter = walk([BooleanProperty("x")], True)
    """
    def _walk(schema, *answers, resolver=None, **kwargs):
        adapter = scripted(*answers)
        values = TraversalEngine(adapter, resolver, **kwargs).walk(schema)
        return values, adapter
    return _walk


@pytest.fixture
def plugins_schema():
    """Optional, unbounded compound with one required text child."""
    return [
        CompoundProperty(
            name="plugins",
            label="Plugins",
            children=[TextProperty(name="plugin_id", label="plugin ID", required=True)],
        )
    ]


@pytest.fixture
def component_schema():
    """
    A small component: its own properties plus two subcomponents.
    """
    return CompoundProperty(
        name="module",
        label="Module",
        required=True,
        multiple=False,
        children=[
            TextProperty(name="root_name", label="Machine name", required=True),
            TextProperty(name="readable_name", label="Readable name", default="{{ root_name|title }}"),
            ChoiceProperty(name="lifecycle", options={"stable": "Stable", "experimental": "Experimental"}),
            CompoundProperty(
                name="plugins",
                label="Plugins",
                children=[
                    TextProperty(name="plugin_id", label="Plugin ID", required=True),
                    BooleanProperty(name="cache", label="caching"),
                ],
            ),
            CompoundProperty(
                name="services",
                label="Services",
                children=[TextProperty(name="service_name", label="Service name", required=True)],
            ),
        ],
    )


@pytest.fixture
def schema_data():
    return {
        "name": "module",
        "label": "Module",
        "properties": [
            {"name": "root_name", "label": "Machine name", "format": "text", "required": True},
            {"name": "readable_name", "format": "string", "default": "{{ root_name }} module"},
            {"name": "dependencies", "format": "text", "multiple": True},
            {
                "name": "lifecycle",
                "format": "choice",
                "options": {"stable": "Stable", "experimental": "Experimental"},
            },
            {
                "name": "plugins",
                "format": "compound",
                "cardinality": -1,
                "properties": [
                    {"name": "plugin_id", "format": "text", "required": True},
                ],
            },
        ],
    }


@pytest.fixture
def schema_file(tmp_path, schema_data):
    path = tmp_path / "module.yml"
    path.write_text(yaml.safe_dump(schema_data, sort_keys=False), encoding="utf-8")
    return path


@pytest.fixture
def missing_file_path(tmp_path):
    """
    Returns a path to a non-existent file in a temp directory.
    """
    return tmp_path / "does_not_exist.yml"
