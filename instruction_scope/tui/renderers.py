from rich.console import Console
from rich.markup import escape

from instruction_scope.errors import InstructionScopeError
from instruction_scope.instructions.models import InstructionDocument, InstructionSnapshot
from instruction_scope.tui.enums import UIStyle
from instruction_scope.tui.sections import UISection
from instruction_scope.tui.tables import DocumentTable, MatchTable, SettingsTable
from instruction_scope.utils import compact_home_path, compact_home_paths_in_text


class InstructionConsoleUI:
    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def render_documents(self, snapshot: InstructionSnapshot, suffix: str) -> None:
        self.console.print(
            UISection.wrap(
                "instructions",
                DocumentTable.summary_block(compact_home_path(snapshot.root), len(snapshot), suffix),
                style=UIStyle.BLUE.value,
            )
        )
        if not snapshot.documents:
            self.console.print(
                UISection.note("documents", "No instruction documents found.", style=UIStyle.YELLOW.value)
            )
            return
        self.console.print(
            UISection.wrap(
                "documents",
                DocumentTable.documents_table(list(snapshot.documents)),
                style=UIStyle.CYAN.value,
            )
        )

    def render_explain(self, target_path: str, rows: list[tuple[InstructionDocument, tuple[str, ...]]]) -> None:
        if not rows:
            self.console.print(
                UISection.note(
                    "resolve",
                    f"No instructions apply to [bold]{escape(target_path)}[/bold].",
                    style=UIStyle.YELLOW.value,
                )
            )
            return
        self.console.print(
            UISection.wrap(
                "resolve",
                MatchTable.explain_table(rows),
                style=UIStyle.GREEN.value,
                subtitle=escape(target_path),
            )
        )

    def render_load_failures(self, failures: list[InstructionScopeError]) -> None:
        self.console.print(
            UISection.bullets(
                "load failures",
                [compact_home_paths_in_text(str(item)) for item in failures],
                style=UIStyle.RED.value,
            )
        )

    def render_validation_ok(self, snapshot: InstructionSnapshot) -> None:
        self.console.print(
            UISection.note(
                "validate",
                f"{len(snapshot)} instruction document(s) loaded from "
                f"{escape(compact_home_path(snapshot.root))}.",
                style=UIStyle.GREEN.value,
            )
        )

    def render_settings(self, values: dict[str, str], source: str) -> None:
        self.console.print(
            UISection.wrap(
                "config",
                SettingsTable.settings_table(values, compact_home_path(source)),
                style=UIStyle.BLUE.value,
            )
        )
