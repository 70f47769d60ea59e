from rich.console import Console

from autopackage.services.notifier import Notifier


class RecordingLogger:
    def __init__(self):
        self.records = []

    def info(self, message, *args):
        self.records.append(("info", message))

    def warning(self, message, *args):
        self.records.append(("warning", message))

    def error(self, message, *args):
        self.records.append(("error", message))


def test_notifier_prints_and_logs_without_markup_injection():
    console = Console(record=True, width=200)
    logger = RecordingLogger()
    notifier = Notifier(logger=logger, console=console)

    notifier.warning("Could not read [assembly: AssemblyVersion]")
    notifier.error("Packaging failed")

    output = console.export_text()
    assert "Warning: Could not read [assembly: AssemblyVersion]" in output
    assert "Error: Packaging failed" in output
    assert logger.records == [
        ("warning", "Could not read [assembly: AssemblyVersion]"),
        ("error", "Packaging failed"),
    ]
