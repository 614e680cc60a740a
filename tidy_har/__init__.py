"""Tidy aggregates of the UCI Human Activity Recognition dataset."""

__version__ = "1.0.0"
