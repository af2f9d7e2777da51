"""Utility helpers for the Adaptation Survival server."""
