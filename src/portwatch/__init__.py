"""Portwatch: endpoint reachability monitor with a self-updating status report."""

__version__ = "0.1.0"
