from pathlib import Path
from typing import Any, Dict, Mapping

from jinja2 import Environment, FileSystemLoader, StrictUndefined
from loguru import logger as log

from propwalk.walker.values import ValueTree


class TemplateManager:
    """
    Renders a component's files from a directory of jinja2 templates.

    Every `*.j2` file under the directory produces one output file at the same
    relative path without the suffix. Paths may contain template expressions too,
    e.g. `{{ root_name }}.info.yml.j2`. Files whose name starts with "_" are
    partials for `{% include %}` and are not rendered on their own.

    Args:
        template_dir (Path): Directory containing the templates.
        strict (bool): Fail on undefined variables instead of rendering them empty.
    """

    SUFFIX = ".j2"

    def __init__(self, template_dir: Path, strict: bool = False):
        self.template_dir = Path(template_dir)
        if not self.template_dir.is_dir():
            raise FileNotFoundError(f"[template] Template directory not found: {self.template_dir}")
        options = {"undefined": StrictUndefined} if strict else {}
        # No auto-escaping: the output is source code, not HTML.
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=False,
            keep_trailing_newline=True,
            **options,
        )
        log.debug("[template] Environment initialized for {}", self.template_dir)

    def templates(self) -> list:
        found = []
        for path in sorted(self.template_dir.rglob(f"*{self.SUFFIX}")):
            if path.name.startswith("_"):
                continue
            found.append(path.relative_to(self.template_dir).as_posix())
        return found

    def render_component(self, values: Mapping[str, Any]) -> Dict[str, str]:
        """
        Render every template against the collected values.

        Args:
            values (Mapping): The ValueTree (or any mapping) from the walk.

        Returns:
            dict: Relative output filename -> rendered code.
        """
        context = values.to_dict() if isinstance(values, ValueTree) else dict(values)
        files = {}
        for name in self.templates():
            filename = self.env.from_string(name[:-len(self.SUFFIX)]).render(**context)
            files[filename] = self.env.get_template(name).render(**context)
            log.debug("[template] Rendered {} -> {}", name, filename)
        return files
