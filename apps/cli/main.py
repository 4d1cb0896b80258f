"""CLI application for autoupdate."""

import json
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from core.config import Config, load_config_file
from core.engine import apply_update_set
from core.errors import AutoUpdateError, FeedDecodeError
from core.feed import UpdateFeedClient
from core.log import configure_logging
from core.models import DependencyFile, UpdateSet
from core.plugins import default_registry
from core.report import changed_pairs, filter_ignored, format_diff, format_json_output
from core.restore import restore_dep_files

# no hard wrapping: diffs and error messages are printed verbatim
console = Console(soft_wrap=True)

DEFAULT_CONFIG_FILE = ".autoupdate.yml"

app = typer.Typer(
    name="autoupdate",
    help="autoupdate - Apply dependency update sets to local manifests",
    add_completion=False,
)


def load_config(config_path: str | None) -> Config:
    """Load the config file, falling back to defaults when the default file is absent."""
    if config_path:
        return load_config_file(config_path)
    if Path(DEFAULT_CONFIG_FILE).is_file():
        return load_config_file(DEFAULT_CONFIG_FILE)
    return Config()


def report_and_write(
    update_set: UpdateSet, config: Config, root: str, dry_run: bool
) -> None:
    """Apply a set, print the result and write updated files unless dry_run."""
    orig_files, upt_files = apply_update_set(update_set, default_registry(root))
    orig_files, upt_files = filter_ignored(orig_files, upt_files, config.ignored_paths)
    pairs = changed_pairs(orig_files, upt_files)

    if config.raw_format:
        console.print_json(format_json_output(update_set.id, orig_files, upt_files))
    elif not pairs:
        console.print("No updates available")
    else:
        for orig, upt in pairs:
            console.print(format_diff(orig, upt), markup=False, highlight=False)

    if not pairs:
        raise typer.Exit(2)  # No changes exit code

    if dry_run:
        return

    written = _last_snapshots(upt_files)
    restore_dep_files(written, root)
    if not config.raw_format:
        console.print(f"Updated {len(written)} files")


def _last_snapshots(files: list[DependencyFile]) -> list[DependencyFile]:
    # a path changed twice appears twice; its last entry carries every change
    latest: dict[str, DependencyFile] = {}
    for dep_file in files:
        latest[dep_file.path] = dep_file
    return list(latest.values())


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")) -> None:
    """autoupdate - Apply dependency update sets to local manifests."""
    configure_logging(level=logging.DEBUG if verbose else logging.WARNING)


@app.command()
def run(
    update_set_id: str = typer.Argument(help="Identifier of the update set to fetch"),
    config_path: str | None = typer.Option(None, "--config", "-c", help="YAML configuration file"),
    root: str = typer.Option(".", "--root", help="Project directory holding the manifests"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show changes without applying"),
) -> None:
    """Fetch an update set from the service and apply it."""
    try:
        config = load_config(config_path)
        update_set = UpdateFeedClient(config.api_endpoint).fetch_update_set(update_set_id)
        report_and_write(update_set, config, root, dry_run)
    except typer.Exit:
        raise
    except AutoUpdateError as e:
        console.print(f"Error: {escape(str(e))}", style="red")
        raise typer.Exit(1)


@app.command()
def apply(
    file_path: str = typer.Argument(help="Update set JSON file"),
    config_path: str | None = typer.Option(None, "--config", "-c", help="YAML configuration file"),
    root: str = typer.Option(".", "--root", help="Project directory holding the manifests"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show changes without applying"),
) -> None:
    """Apply an update set stored in a local JSON file."""
    try:
        config = load_config(config_path)
        path_obj = Path(file_path)
        if not path_obj.exists():
            console.print(f"Error: File {file_path} not found", style="red")
            raise typer.Exit(1)
        try:
            data = json.loads(path_obj.read_text())
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise FeedDecodeError(f"{file_path} is not valid JSON: {e}") from e
        report_and_write(UpdateSet.from_dict(data), config, root, dry_run)
    except typer.Exit:
        raise
    except AutoUpdateError as e:
        console.print(f"Error: {escape(str(e))}", style="red")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
