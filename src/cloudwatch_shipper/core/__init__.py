"""Core building blocks: levels, records, rendering, errors and settings."""
