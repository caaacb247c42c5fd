"""Recursive crawler: frontier, fetch strategies, link extraction and the orchestrator."""
