# ABOUTME: Exception definitions for external collaborator failures.
# ABOUTME: Phases catch these and settle their own gates with fallback outcomes.


class ProgressApiError(Exception):
    """Raised when the progress API cannot be reached or rejects a request"""

    pass


class SessionLoadError(Exception):
    """Raised when a save slot is empty or cannot be read"""

    pass
