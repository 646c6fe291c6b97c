"""Domain errors for desksetup."""


class SetupError(RuntimeError):
    """Raised when provisioning cannot continue safely."""
