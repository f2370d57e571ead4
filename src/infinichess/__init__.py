"""infinichess — rule engine for chess on an unbounded board."""

__version__ = "0.1.0"
