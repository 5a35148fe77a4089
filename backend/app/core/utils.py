"""
Utility functions for the application.
"""
from typing import Any, Dict
import uuid


def format_error(message: str, details: Any = None) -> Dict[str, Any]:
    """Format error response."""
    response = {"error": message}
    if details:
        response["details"] = details
    return response


def generate_blob_name() -> str:
    """Generate an opaque blob store key, independent of any client filename."""
    return uuid.uuid4().hex
