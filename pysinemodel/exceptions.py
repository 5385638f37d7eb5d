class ConfigurationError(Exception):
    """Raised when analysis parameters are invalid or unsupported."""


class ContractViolationError(Exception):
    """Raised when per-frame input arrays break the documented contract."""
