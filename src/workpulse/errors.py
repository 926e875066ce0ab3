"""Exception types raised by workpulse."""


class WorkpulseError(Exception):
    """Base class for workpulse errors."""


class ConfigurationError(WorkpulseError, ValueError):
    """Structurally invalid configuration (tier tables, rules, pair specs)."""
