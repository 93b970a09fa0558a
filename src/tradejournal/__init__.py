"""Trading journal with CSV bulk import of trades."""

__version__ = "0.1.0"


def __getattr__(name):
    # The CLI pulls in click; load it only when the entry point is asked for
    if name == "main":
        from tradejournal.cli.main import main
        return main
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
