"""sprintsnap command-line interface.

Exposes:
    cli -- Click group entry point (registered as ``sprintsnap`` script).
"""

from sprintsnap.cli.main import cli

__all__ = ["cli"]
