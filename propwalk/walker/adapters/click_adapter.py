from functools import wraps
from typing import Callable, Dict, List, Optional, Sequence

import click

from propwalk.walker.errors import AbortedSession, AdapterValidationError
from propwalk.walker.prompt import NONE_OPTION, OptionsProvider, PromptAdapter

# Search results shown at once; the rest are reachable by narrowing the query.
MAX_SEARCH_RESULTS = 30


def abortable(fn: Callable) -> Callable:
    """Turn click's Abort / Ctrl-C / EOF into AbortedSession."""

    @wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except (click.Abort, KeyboardInterrupt, EOFError) as e:
            raise AbortedSession("Session cancelled by user") from e

    return wrapper


class ClickPromptAdapter(PromptAdapter):
    """
    Terminal prompts built on click.

    Option keys are what the user types; labels are shown next to them. Invalid
    answers print an error and the question is asked again.

    Args:
        color (str): Foreground color for informational lines (breadcrumbs).
    """

    def __init__(self, color: str = "cyan"):
        self.color = color

    @staticmethod
    def _until_valid(ask: Callable[[], str], convert: Callable[[str], object]):
        while True:
            raw = ask()
            try:
                return convert(raw)
            except AdapterValidationError as e:
                click.echo(f"Error: {e}", err=True)

    @staticmethod
    def _lookup(answer: str, keys: Sequence[str]) -> str:
        lookup = {key.lower(): key for key in keys}
        key = lookup.get(answer.strip().lower())
        if key is None:
            raise AdapterValidationError(f'Value "{answer}" is invalid.')
        return key

    @staticmethod
    def _list_options(options: Dict[str, str]) -> None:
        for key, label in options.items():
            click.echo(f"  [{key}] {label}")

    @abortable
    def confirm(self, label: str, default: bool = False) -> bool:
        return click.confirm(label, default=default)

    @abortable
    def select_one(self, label: str, options: Dict[str, str], default: Optional[str] = None,
                   extra: Optional[Dict[str, str]] = None) -> Optional[str]:
        click.echo(label)
        self._list_options(options)
        keys = list(options) + [key for key in (extra or {}) if key not in options]
        key = click.prompt(
            "Choice",
            type=click.Choice(keys, case_sensitive=False),
            default=default,
            show_choices=False,
        )
        return None if key == NONE_OPTION else key

    @abortable
    def select_many(self, label: str, options: Dict[str, str], default: Sequence[str] = (),
                    extra: Optional[Dict[str, str]] = None, limit: Optional[int] = None,
                    required: bool = False) -> List[str]:
        click.echo(label)
        self._list_options(options)
        keys = list(options) + [key for key in (extra or {}) if key not in options]

        def convert(raw: str) -> List[str]:
            picked = {self._lookup(part, keys) for part in raw.split(",") if part.strip()}
            if required and not picked:
                raise AdapterValidationError("At least one value must be chosen.")
            if limit is not None and len(picked) > limit:
                raise AdapterValidationError(f"At most {limit} values may be chosen.")
            return [key for key in keys if key in picked]

        return self._until_valid(
            lambda: click.prompt("Choices, comma-separated", default=", ".join(default), show_default=bool(default)),
            convert,
        )

    @abortable
    def text(self, label: str, default: str = "", required: bool = False) -> str:
        def convert(raw: str) -> str:
            value = raw.strip()
            if required and not value:
                raise AdapterValidationError("A value is required.")
            return value

        return self._until_valid(
            lambda: click.prompt(label, default=default, show_default=bool(default)),
            convert,
        )

    @abortable
    def text_list(self, label: str, default: Sequence[str] = (), limit: Optional[int] = None,
                  required: bool = False) -> List[str]:
        if default:
            click.echo(f"Current values: {', '.join(default)}")
            if click.confirm("Keep these values?", default=True):
                return list(default)[:limit] if limit is not None else list(default)

        lines: List[str] = []
        while limit is None or len(lines) < limit:
            line = click.prompt(label, default="", show_default=False).strip()
            if line:
                lines.append(line)
            elif required and not lines:
                click.echo("Error: at least one value is required.", err=True)
            else:
                break
        return lines

    def _search(self, label: str, provider: OptionsProvider) -> Optional[str]:
        """
        One search round: query, list matches, pick one. An empty query ends the round.

        Returns:
            str | None: The picked key, or None when the query was empty.
        """
        while True:
            query = click.prompt(f"{label} (type to search)", default="", show_default=False).strip()
            if not query:
                return None
            results = provider(query)
            if not results:
                click.echo(f"No matches for '{query}'.")
                continue

            keys = list(results)
            for index, key in enumerate(keys[:MAX_SEARCH_RESULTS], start=1):
                click.echo(f"  [{index}] {results[key]}")
            if len(keys) > MAX_SEARCH_RESULTS:
                click.echo(f"  ... and {len(keys) - MAX_SEARCH_RESULTS} more; refine the search.")

            def convert(raw: str) -> Optional[str]:
                raw = raw.strip()
                if not raw:
                    return None
                if raw.isdigit() and 1 <= int(raw) <= min(len(keys), MAX_SEARCH_RESULTS):
                    return keys[int(raw) - 1]
                return self._lookup(raw, keys)

            picked = self._until_valid(
                lambda: click.prompt("Pick a number or key, empty to search again", default="", show_default=False),
                convert,
            )
            if picked is not None:
                return picked

    @abortable
    def search_one(self, label: str, provider: OptionsProvider, required: bool = False) -> Optional[str]:
        while True:
            key = self._search(label, provider)
            if key is None or key == NONE_OPTION:
                if required:
                    click.echo("Error: an option must be chosen.", err=True)
                    continue
                return None
            return key

    @abortable
    def search_many(self, label: str, provider: OptionsProvider, limit: Optional[int] = None,
                    required: bool = False) -> List[str]:
        picked: List[str] = []
        while limit is None or len(picked) < limit:
            prompt = label if not picked else f"{label} (empty to finish)"
            key = self._search(prompt, provider)
            if key is None:
                if required and not picked:
                    click.echo("Error: at least one value is required.", err=True)
                    continue
                break
            if key != NONE_OPTION and key not in picked:
                picked.append(key)
        return picked

    def message(self, text: str) -> None:
        click.secho(text, fg=self.color)
