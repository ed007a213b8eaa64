"""Command-line entry points for the request orchestrator."""
