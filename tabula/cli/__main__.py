"""Module entry point for `python -m tabula.cli`."""

if __name__ == "__main__":  # pragma: no cover (invocation driven)
    from tabula.cli import cli

    cli()
