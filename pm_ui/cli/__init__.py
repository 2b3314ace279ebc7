"""Typer command-line entry points."""
