"""Buildvest API: investor/builder onboarding and builder/project listings."""

__version__ = "0.1.0"
