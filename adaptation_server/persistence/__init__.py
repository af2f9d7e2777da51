"""Persistence layer for the Adaptation Survival server."""
