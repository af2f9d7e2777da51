"""
Centralized error types and constants for the Adaptation Survival server.

Keeping the user-visible messages in one place guarantees that the same
failure produces the same {"error": ...} text from every endpoint.
"""

from enum import Enum


class ErrorType(Enum):
    """Standardized error types for consistent categorization."""

    VALIDATION_ERROR = "validation_error"
    MISSING_REQUIRED_FIELD = "missing_required_field"
    INVALID_INPUT = "invalid_input"
    RESOURCE_NOT_FOUND = "resource_not_found"
    STORAGE_TIMEOUT = "storage_timeout"
    STORAGE_ERROR = "storage_error"
    DATABASE_ERROR = "database_error"
    CONFIGURATION_ERROR = "configuration_error"
    INTERNAL_ERROR = "internal_error"


class ErrorMessages:
    """Common error messages for consistent user experience."""

    # Validation
    MISSING_REQUIRED_FIELDS = "Missing required fields"
    INVALID_REQUEST_DATA = "Invalid request data"
    MISSING_CREATURE_ID = "Missing creature ID"
    MISSING_FILE_ID = "Missing file ID"
    NO_FILE_PROVIDED = "No file provided"
    FILE_TOO_LARGE = "File too large. Maximum size is {max_mb}MB."
    INVALID_FILE_TYPE = "Invalid file type. Only images are allowed."

    # Resources
    CREATURE_NOT_FOUND = "Creature not found"
    IMAGE_NOT_FOUND = "Image not found"

    # Operations
    FETCH_CREATURES_FAILED = "Failed to fetch creatures"
    CREATE_CREATURE_FAILED = "Failed to create creature"
    DELETE_CREATURE_FAILED = "Failed to delete creature"
    FETCH_ENVIRONMENTS_FAILED = "Failed to fetch environments"
    SIMULATION_FAILED = "Failed to run simulation"
    FETCH_EVENTS_FAILED = "Failed to fetch simulation events"
    UPLOAD_FAILED = "Failed to upload file"
    UPLOAD_TIMEOUT = "Image upload timed out"
    UPLOAD_RETRY_SUGGESTION = "Please try again with a smaller image"
    RETRIEVE_IMAGE_FAILED = "Failed to retrieve image"
    RETRIEVE_IMAGE_TIMEOUT = "Image retrieval timed out"
    DELETE_IMAGE_FAILED = "Failed to delete image"
    DEBUG_FAILED = "Debug failed"

    # System
    INTERNAL_ERROR = "An internal error occurred"
