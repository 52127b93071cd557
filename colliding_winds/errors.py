class ConfigurationError(ValueError):
    """Raised when the orbit or wind configuration is invalid.

    Configuration errors are detected when the sources and the
    driver are constructed, never during an injection pass.
    """


class ConditionStateError(RuntimeError):
    """Raised when the condition driver is used out of order,
    e.g. refresh() before initialize() or a second initialize()."""
