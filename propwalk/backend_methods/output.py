from pathlib import Path
from typing import Dict, List

from loguru import logger as log

from propwalk.walker.prompt import PromptAdapter


def write_component_files(component_dir: Path, files: Dict[str, str], adapter: PromptAdapter,
                          dry_run: bool = False) -> List[Path]:
    """
    Write generated files under a component directory.

    Existing files are only overwritten when the user confirms. Subdirectories in
    file names are created as needed.

    Args:
        component_dir (Path): Base folder for the component. May not exist yet.
        files (dict): Relative filename -> file contents.
        adapter (PromptAdapter): Asks the overwrite question.
        dry_run (bool): Report what would be written, write nothing.

    Returns:
        list[Path]: Paths actually written.
    """
    component_dir = Path(component_dir)
    written = []

    for filename, code in files.items():
        path = component_dir / filename

        if dry_run:
            log.info("[output] Dry run, not writing {}", path)
            continue

        if path.exists() and not adapter.confirm(f"File {filename} exists. Overwrite this file?", False):
            log.info("[output] Kept existing {}", path)
            continue

        if not path.parent.is_dir():
            path.parent.mkdir(parents=True, exist_ok=True)
            log.info("[output] Created directory {}", path.parent)

        path.write_text(code, encoding="utf-8")
        written.append(path)
        log.info("[output] Wrote {}", path)

    return written
