"""
Helper Functions

Contains utility functions used throughout the application.
"""

from typing import Dict, Optional


def get_user_identity(request_obj, session_id: Optional[str] = None) -> Dict[str, Optional[str]]:
    """Extract user identity information from request."""
    user_ip = getattr(request_obj, 'remote_addr', None) or 'unknown'

    return {
        'user_ip': user_ip,
        'session_id': session_id
    }


def normalize_key(key) -> Optional[str]:
    """
    Map a virtual keyboard key to an action.

    Returns 'ENTER', 'BACKSPACE', a single uppercase letter, or None for
    anything else.
    """
    if not isinstance(key, str):
        return None

    key = key.strip()
    if key.upper() in ('ENTER', 'BACKSPACE'):
        return key.upper()
    if len(key) == 1 and key.isascii() and key.isalpha():
        return key.upper()
    return None
