"""Command-line interface for protoscribe."""
