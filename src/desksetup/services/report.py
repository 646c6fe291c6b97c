"""Final run summary."""

from rich.console import Console
from rich.markup import escape

from desksetup.models import ResultLedger


class ReportService:
    def __init__(self, console: Console):
        self.console = console

    def show_report(self, ledger: ResultLedger, log_file: str):
        self.console.print("\n[bold]=== FINAL REPORT ===[/bold]")
        self.console.print(f"Installed: {len(ledger.installed)}")
        self.console.print(f"Failed   : {len(ledger.failed)}")
        self.console.print(f"Skipped  : {len(ledger.skipped)}")

        if ledger.failed:
            names = escape(" ".join(ledger.failed))
            self.console.print(f"[red]Failed packages: {names}[/red]")
        if ledger.skipped:
            names = escape(
                ", ".join(f"{name} ({ledger.skip_reasons.get(name, 'skipped')})" for name in ledger.skipped)
            )
            self.console.print(f"[yellow]Skipped packages: {names}[/yellow]")
        self.console.print(f"Full log: {escape(log_file)}")
