from pathlib import Path
from typing import Dict, Iterable

import click
from loguru import logger as log

from propwalk.backend_methods import TemplateManager, write_component_files
from propwalk.context import _globals
from propwalk.context.config import Config
from propwalk.context.logger import log_func
from propwalk.schema import (COMPONENT_ONLY, SchemaLoader, TemplateDefaults, component_options, preset_values,
                             select_components, strip_internal)
from propwalk.util.fileio import FileIO
from propwalk.walker import AbortedSession, SchemaError, TraversalEngine
from propwalk.walker.adapters import ClickPromptAdapter, ScriptedPromptAdapter


def parse_presets(presets: Iterable[str]) -> Dict[str, str]:
    values = {}
    for preset in presets:
        name, sep, value = preset.partition("=")
        if not sep or not name.strip():
            raise click.BadParameter(f"Expected NAME=VALUE, got {preset!r}", param_hint="--set")
        values[name.strip()] = value
    return values


def schema_problem(e: SchemaError) -> click.ClickException:
    where = f" in property '{e.property_name}'" if e.property_name else ""
    return click.ClickException(f"Schema configuration problem{where}: {e}")


@click.command()
@click.argument("schema", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("component_types", nargs=-1)
@click.option("--existing", is_flag=True, help="The component already exists; only add subcomponents to it.")
@click.option("--set", "presets", multiple=True, metavar="NAME=VALUE",
              help="Fix a top-level value instead of asking for it. Repeatable.")
@click.option("--answers", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help="Replay answers from a YAML/JSON/TOML file instead of prompting.")
@click.option("--output", "output_file", type=click.Path(dir_okay=False, path_type=Path),
              help="Write the collected values to this file instead of stdout.")
@click.option("--format", "output_format", type=click.Choice(_globals.OUTPUT_FORMATS), default=None,
              help="Format of the collected values. Defaults to the output_format setting.")
@click.option("--summary", is_flag=True, help="Leave internal properties out of the collected values.")
@click.option("--templates", type=click.Path(exists=True, file_okay=False, path_type=Path),
              help="Render the jinja2 templates in this directory with the collected values.")
@click.option("--output-dir", type=click.Path(file_okay=False, path_type=Path), default=Path("."),
              show_default=True, help="Where rendered files are written.")
@click.option("--dry-run", is_flag=True, help="Show rendered files without writing them.")
@click.pass_context
def run(ctx, schema, component_types, existing, presets, answers, output_file, output_format, summary,
        templates, output_dir, dry_run):
    """
    Walks SCHEMA interactively and outputs the collected values.

    COMPONENT_TYPES picks which subcomponents to add ("module" for the component
    on its own). When omitted, you are asked.
    """
    ctx.ensure_object(dict)
    settings = ctx.obj.get("settings") or Config.load()

    with log_func("build"):
        try:
            root = SchemaLoader.validate(SchemaLoader.load(schema))
        except SchemaError as e:
            raise schema_problem(e)

        try:
            preset_values(root, parse_presets(presets))
        except KeyError as e:
            raise click.BadParameter(str(e), param_hint="--set")

        adapter = ScriptedPromptAdapter.from_file(answers) if answers else ClickPromptAdapter()
        engine = TraversalEngine(
            adapter,
            TemplateDefaults(),
            search_threshold=settings["search_threshold"],
            separator=settings["breadcrumb_separator"],
        )

        try:
            chosen = list(component_types)
            if not chosen:
                options = component_options(root, existing=existing)
                if list(options) == [COMPONENT_ONLY]:
                    chosen = [COMPONENT_ONLY]
                elif options:
                    if existing:
                        prompt = "This component already exists. Choose component types to add to it"
                    else:
                        prompt = "This component doesn't exist. Choose component types to start it with"
                    chosen = adapter.select_many(prompt, options)
            if not chosen:
                if existing:
                    raise click.ClickException("Nothing to build: no component types chosen.")
                chosen = [COMPONENT_ONLY]

            try:
                preselected = select_components(root, chosen, existing=existing)
            except ValueError as e:
                raise click.BadParameter(str(e), param_hint="COMPONENT_TYPES")

            values = engine.walk(root, preselected=preselected)
        except SchemaError as e:
            raise schema_problem(e)
        except AbortedSession as e:
            log.info("[build] Session aborted, nothing produced: {}", e)
            ctx.exit(1)

        data = strip_internal(values, root) if summary else values.to_dict()
        fmt = (output_format or settings["output_format"]).lower()
        if output_file:
            FileIO.write(output_file, data, fmt)
            log.info("[build] Values written to {}", output_file)
        else:
            click.echo(FileIO.dumps(data, fmt))

        if templates:
            files = TemplateManager(templates).render_component(values)
            for filename, code in files.items():
                click.secho(f"Proposed {filename}:", fg="green")
                click.echo(code)
            try:
                written = write_component_files(output_dir, files, adapter, dry_run=dry_run)
            except AbortedSession:
                ctx.exit(1)
            if not dry_run:
                click.echo(f"{len(written)} file(s) written to {output_dir}")
