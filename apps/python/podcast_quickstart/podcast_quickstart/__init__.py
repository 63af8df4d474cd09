"""Command-line quickstart for the podcasts repository."""
