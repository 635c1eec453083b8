"""
Primer Exception Hierarchy

Structured exceptions for the startup-state pipeline.  Construction of
the graph and the symbol table never raises; these types cover the few
places that can fail: configuration, directory repair, and the one-shot
freeze/publish lifecycle.

Usage::

    from primer.exceptions import PrimerError, DirectoryError

    try:
        ensurer.ensure_exists("./uploads")
    except DirectoryError as exc:
        print(f"Could not create directory: {exc}")
    except PrimerError as exc:
        print(f"Primer error: {exc}")
"""


class PrimerError(Exception):
    """Base exception for all Primer errors."""


class ConfigError(PrimerError, ValueError):
    """Configuration is invalid (e.g. a malformed edge list).

    Inherits from ``ValueError`` so callers that already catch
    ``ValueError`` from parsing keep working.
    """


class DirectoryError(PrimerError, OSError):
    """A required directory could not be ensured.

    Inherits from ``OSError`` for intuitive exception handling.
    """


class FrozenStateError(PrimerError, RuntimeError):
    """A frozen structure was mutated, or a barrier was published twice."""


class StateNotReadyError(PrimerError):
    """The startup state was read before it was published."""
