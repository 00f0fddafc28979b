from __future__ import annotations


class InputGrammarError(ValueError):
    """Raised when legacy electric-field input cannot be understood."""


class ArchiveCompatibilityError(RuntimeError):
    """Raised when an archive record cannot be read by this version."""
