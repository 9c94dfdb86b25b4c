from rich.markup import escape
from rich.table import Column, Table

from instruction_scope.instructions.models import InstructionDocument


def _patterns_text(patterns: tuple[str, ...]) -> str:
    shown = [escape(pattern) if pattern else "[dim]<empty>[/dim]" for pattern in patterns]
    return ", ".join(shown) if shown else "[yellow]none[/yellow]"


class DocumentTable:
    @staticmethod
    def summary_block(root: str, count: int, suffix: str) -> Table:
        table = Table.grid(padding=(0, 2))
        table.add_column(style="bold")
        table.add_column()
        table.add_row("Root", root)
        table.add_row("Suffix", suffix)
        table.add_row("Documents", str(count))
        return table

    @staticmethod
    def documents_table(documents: list[InstructionDocument]) -> Table:
        table = Table(
            Column(header="Id", overflow="fold"),
            Column(header="Apply to", overflow="fold"),
            Column(header="Description", overflow="ellipsis"),
            expand=True,
            header_style="bold",
        )
        for document in documents:
            table.add_row(escape(document.id), _patterns_text(document.apply_to), escape(document.description))
        return table


class MatchTable:
    @staticmethod
    def explain_table(rows: list[tuple[InstructionDocument, tuple[str, ...]]]) -> Table:
        table = Table(
            Column(header="#", width=3),
            Column(header="Id", overflow="fold"),
            Column(header="Matched by", overflow="fold"),
            expand=True,
            header_style="bold",
        )
        for position, (document, patterns) in enumerate(rows, start=1):
            table.add_row(str(position), escape(document.id), escape(", ".join(patterns)))
        return table


class SettingsTable:
    @staticmethod
    def settings_table(values: dict[str, str], source: str) -> Table:
        table = Table.grid(padding=(0, 2))
        table.add_column(style="bold")
        table.add_column()
        table.add_row("Config file", escape(source))
        for key, value in values.items():
            table.add_row(key, escape(value))
        return table
