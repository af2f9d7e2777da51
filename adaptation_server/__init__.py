"""
Adaptation Survival server package.

A FastAPI service for designing creatures with adaptation traits, assigning
them to environments and running randomized survival simulations.
"""

__version__ = "0.1.0"
