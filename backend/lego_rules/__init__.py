"""Lego rule engine: prioritized, asynchronous evaluation of rule conditions."""

__version__ = "0.1.0"
