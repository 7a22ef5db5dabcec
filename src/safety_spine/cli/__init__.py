"""Command-line interface for safety-spine (Typer + Rich)."""
