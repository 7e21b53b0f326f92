"""
Operations package - error mapping between the CLI and the store.

Keeps CLI commands thin by centralizing exception-to-exit-code mapping.
"""
from .mappers import exit_code_for, run_and_exit

__all__ = ["exit_code_for", "run_and_exit"]
