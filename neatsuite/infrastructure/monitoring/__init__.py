"""Logging configuration and logger adapters."""
