"""Listener token generation."""
import uuid


def new_listener_token() -> str:
    # Uniqueness is all that is required of a token, not unpredictability.
    return str(uuid.uuid4()).upper()
