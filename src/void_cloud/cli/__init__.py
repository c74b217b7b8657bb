"""Command line interface for void-cloud."""
