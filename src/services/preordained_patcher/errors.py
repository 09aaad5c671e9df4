"""Exceptions raised while decoding and patching simtype data.

None of these are recoverable: any of them means the asset layout or naming
does not match what the patch expects, and the run must stop before anything
is written back.
"""


class PreordainedError(Exception):
    """Base class for all patch failures."""
    pass


class DecodeError(PreordainedError):
    """Raised when a symbol table or batch buffer is truncated or out of range."""
    pass


class ResolutionError(PreordainedError):
    """Raised when a fab or fab slot name is missing from its symbol table."""
    pass


class MarkerNotFoundError(PreordainedError):
    """Raised when a candidate simtype has no fab id marker."""
    pass


class BackupError(PreordainedError):
    """Raised when the patch_0.pak backup is unreadable or incomplete."""
    pass
