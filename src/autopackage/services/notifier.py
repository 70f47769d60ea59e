"""User-facing notifications for AutoPackage."""

import logging

from rich.console import Console
from rich.markup import escape


class Notifier:
    """Reports release progress on the console and mirrors it to the log."""

    def __init__(self, logger: logging.Logger, console: Console):
        self.logger = logger
        self.console = console

    def info(self, message: str):
        self.console.print(f"[blue]{escape(message)}[/blue]")
        self.logger.info(message)

    def success(self, message: str):
        self.console.print(f"[green]{escape(message)}[/green]")
        self.logger.info(message)

    def warning(self, message: str):
        self.console.print(f"[yellow]Warning:[/yellow] {escape(message)}")
        self.logger.warning(message)

    def error(self, message: str):
        self.console.print(f"[bold red]Error:[/bold red] {escape(message)}")
        self.logger.error(message)
