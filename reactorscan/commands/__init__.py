"""CLI commands for reactorscan."""
