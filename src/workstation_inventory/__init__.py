"""Workstation Inventory Tool: latest scan per workstation and roster reconciliation."""

__version__ = "1.0.0"
