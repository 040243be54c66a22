from pathlib import Path
from typing import List

import click

from propwalk.schema import SchemaLoader
from propwalk.walker import ChoiceProperty, CompoundProperty, PropertyDescriptor, SchemaError


def describe(descriptor: PropertyDescriptor) -> str:
    """One summary line: name, format and the flags that shape the prompt."""
    flags = [descriptor.format.value]
    if descriptor.required:
        flags.append("required")
    if descriptor.is_multiple():
        flags.append("multiple")
        if descriptor.cardinality:
            flags.append(f"max {descriptor.cardinality}")
    if isinstance(descriptor, ChoiceProperty):
        flags.append(f"{descriptor.option_count()} options")
    if descriptor.skip:
        flags.append("skip")
    if descriptor.internal:
        flags.append("internal")
    return f"{descriptor.name} ({', '.join(flags)}): {descriptor.label}"


def schema_lines(compound: CompoundProperty, show_all: bool = False, depth: int = 0) -> List[str]:
    lines = []
    for descriptor in compound.children:
        if descriptor.internal and not show_all:
            continue
        lines.append("  " * depth + describe(descriptor))
        if isinstance(descriptor, CompoundProperty):
            lines += schema_lines(descriptor, show_all, depth + 1)
    return lines


@click.command()
@click.argument("schema", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--all", "show_all", is_flag=True, help="Include internal properties.")
def run(schema, show_all):
    """Prints the property tree of SCHEMA."""
    try:
        root = SchemaLoader.validate(SchemaLoader.load(schema))
    except SchemaError as e:
        where = f" in property '{e.property_name}'" if e.property_name else ""
        raise click.ClickException(f"Schema configuration problem{where}: {e}")

    click.secho(f"{root.label} ({root.name})", bold=True)
    for line in schema_lines(root, show_all=show_all, depth=1):
        click.echo(line)
