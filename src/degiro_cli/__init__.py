"""Command-line interface for the DeGiro client."""
