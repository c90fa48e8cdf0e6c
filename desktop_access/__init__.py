"""Desktop access control: rule evaluation and API grants."""

__version__ = "0.1.0"
