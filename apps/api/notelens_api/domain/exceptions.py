from __future__ import annotations


class NotelensError(Exception):
    pass


class PathError(NotelensError, ValueError):
    pass


class NoteNotFoundError(NotelensError, LookupError):
    pass


class NoteReadError(NotelensError, OSError):
    pass


class VaultEnumerationError(NotelensError, RuntimeError):
    pass
