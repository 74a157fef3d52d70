"""spendbook - personal finance tracking with recurring transactions."""

__version__ = "0.1.0"


# The CLI pulls in click and every storage backend; resolve it on first use.
def __getattr__(name):
    if name == "main":
        from spendbook.cli.main import main
        return main
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
