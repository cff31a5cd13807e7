"""Command line client for the streetlight monitoring service.

The Typer application is ``cli.app.app``; the ``streetlight`` console script
points there. The package root does not re-export it so that tests can patch
names on the ``cli.app`` module.
"""

__all__: list[str] = []
