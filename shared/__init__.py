"""
Shared building blocks for the request orchestrator: schemas, HTTP transport,
configuration, errors and logging setup.
"""
