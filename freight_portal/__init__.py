"""Freight brokerage onboarding and approval API."""

__version__ = "0.1.0"
