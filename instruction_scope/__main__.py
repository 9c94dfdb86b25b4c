import logging
from pathlib import Path
from typing import Any, Dict, Optional

import click
from rich.console import Console

from instruction_scope.composer import IContextComposer, JsonContextComposer, MarkdownContextComposer
from instruction_scope.config import ConfigRepository, Settings
from instruction_scope.errors import InstructionScopeError, RegistryLoadError
from instruction_scope.instructions.models import InstructionSnapshot
from instruction_scope.instructions.registry import InstructionRegistry
from instruction_scope.log import configure_logging
from instruction_scope.matching.matcher import explain, match, normalize_target_path
from instruction_scope.tui.enums import OutputFormat
from instruction_scope.tui.renderers import InstructionConsoleUI


logger = logging.getLogger(__name__)

FORMAT_VALUES = [item.value for item in OutputFormat]

COMPOSERS: Dict[OutputFormat, IContextComposer] = {
    OutputFormat.MARKDOWN: MarkdownContextComposer(),
    OutputFormat.JSON: JsonContextComposer(),
}


def _level_for(verbose: int, configured: str) -> str:
    if verbose >= 2:
        return "DEBUG"
    if verbose == 1:
        return "INFO"
    return configured


def _registry_from_obj(obj: Dict[str, Any]) -> InstructionRegistry:
    return InstructionRegistry(obj["root"], suffix=obj["suffix"])


def _load_snapshot(obj: Dict[str, Any], ui: InstructionConsoleUI) -> InstructionSnapshot:
    try:
        return _registry_from_obj(obj).snapshot
    except RegistryLoadError as exc:
        ui.render_load_failures(exc.failures)
        raise click.exceptions.Exit(1)
    except InstructionScopeError as exc:
        raise click.ClickException(str(exc))


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--workspace",
    "-w",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Workspace the instructions directory is resolved against (default: cwd).",
)
@click.option(
    "--root",
    "-r",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Instruction root directory; overrides the configured instructionsDir.",
)
@click.option("--suffix", default=None, help="Document file suffix (default: .instructions.md).")
@click.option("--verbose", "-v", count=True, help="Increase log verbosity (-v info, -vv debug).")
@click.pass_context
def cli(
    ctx: click.Context,
    workspace: Optional[Path],
    root: Optional[Path],
    suffix: Optional[str],
    verbose: int,
) -> None:
    """Resolve which instruction documents apply to a file."""
    config = ConfigRepository()
    try:
        settings = config.load_settings()
    except InstructionScopeError as exc:
        raise click.ClickException(str(exc))

    configure_logging(_level_for(verbose, settings.log_level))

    base = (workspace or Path.cwd()).expanduser()
    resolved_root = root.expanduser() if root is not None else settings.resolve_root(base)
    ctx.obj = {
        "config": config,
        "settings": settings,
        "root": resolved_root,
        "suffix": suffix or settings.suffix,
    }
    logger.debug("Using instruction root %s", resolved_root)


@cli.command("list", help="List loaded instruction documents.")
@click.pass_obj
def list_documents(obj: Dict[str, Any]) -> None:
    ui = InstructionConsoleUI(Console())
    snapshot = _load_snapshot(obj, ui)
    ui.render_documents(snapshot, suffix=obj["suffix"])


@cli.command(help="Print the instruction context that applies to PATH.")
@click.argument("path")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(FORMAT_VALUES, case_sensitive=False),
    default=OutputFormat.MARKDOWN.value,
    show_default=True,
)
@click.option("--explain", "explain_matches", is_flag=True, help="Show which patterns matched instead of the context.")
@click.pass_obj
def resolve(obj: Dict[str, Any], path: str, output_format: str, explain_matches: bool) -> None:
    ui = InstructionConsoleUI(Console())
    snapshot = _load_snapshot(obj, ui)
    target_path = normalize_target_path(path)
    if not target_path:
        raise click.BadParameter("path must not be empty", param_hint="PATH")

    matched = match(snapshot, target_path)
    logger.info("%d of %d instruction document(s) apply to %s", len(matched), len(snapshot), target_path)

    if explain_matches:
        ui.render_explain(target_path, [(document, explain(document, target_path)) for document in matched])
        return

    selected = OutputFormat(output_format.lower())
    if selected == OutputFormat.IDS:
        for document in matched:
            click.echo(document.id)
        return
    click.echo(COMPOSERS[selected].compose(matched, target_path), nl=False)


@cli.command(help="Load every instruction document and report failures.")
@click.pass_obj
def validate(obj: Dict[str, Any]) -> None:
    ui = InstructionConsoleUI(Console())
    snapshot = _load_snapshot(obj, ui)
    ui.render_validation_ok(snapshot)


@cli.command(help="Print the body of a single instruction document.")
@click.argument("document_id")
@click.pass_obj
def show(obj: Dict[str, Any], document_id: str) -> None:
    ui = InstructionConsoleUI(Console())
    snapshot = _load_snapshot(obj, ui)
    document = snapshot.get(document_id)
    if document is None:
        raise click.ClickException(f"Instruction document not found: {document_id}")
    click.echo(document.body, nl=not document.body.endswith("\n"))


@cli.command("config", help="Show effective configuration.")
@click.pass_obj
def show_config(obj: Dict[str, Any]) -> None:
    ui = InstructionConsoleUI(Console())
    settings: Settings = obj["settings"]
    values = settings.as_dict()
    values["suffix"] = obj["suffix"]
    values["root"] = str(obj["root"])
    ui.render_settings(values, str(obj["config"].config_path))


def main() -> int:
    try:
        result = cli(standalone_mode=False)
    except click.exceptions.Exit as exc:
        code = exc.exit_code
        return code if isinstance(code, int) else 1
    except click.ClickException as exc:
        exc.show()
        return 2
    return result if isinstance(result, int) else 0


if __name__ == "__main__":
    raise SystemExit(main())
