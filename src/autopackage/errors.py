"""Domain errors for AutoPackage."""


class ReleaseError(RuntimeError):
    """Raised when a release step cannot complete."""
