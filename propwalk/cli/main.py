# propwalk/cli/main.py
from pathlib import Path

import click

from propwalk.cli.commands import build
from propwalk.cli.commands import list_schema
from propwalk.context import _globals
from propwalk.context.config import Config
from propwalk.context.logger import Logger


@click.group()
@click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help=f"Settings file. Defaults to ./{_globals.CFG_FILENAME}.")
@click.option("--log-level", type=click.Choice(_globals.LOG_LEVELS, case_sensitive=False), default=None,
              help="Overrides the log_level setting.")
@click.option("--no-log-file", is_flag=True, help="Log to stderr only.")
@click.pass_context
def cli(ctx, config_path, log_level, no_log_file):
    ctx.ensure_object(dict)
    try:
        settings = Config.load(config_path)
    except RuntimeError as e:
        raise click.ClickException(str(e))

    ctx.obj["settings"] = settings
    Logger.from_settings(settings, level=log_level, to_file=not no_log_file)


cli.add_command(cmd=build.run, name="build")
cli.add_command(cmd=list_schema.run, name="list")


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
