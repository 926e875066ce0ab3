"""workpulse: psychosocial risk analytics over GHQ-12 survey snapshots."""

__version__ = "0.3.0"
