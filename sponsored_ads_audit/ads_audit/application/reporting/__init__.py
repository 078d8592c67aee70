"""Reporting helpers shared by the application layer."""
