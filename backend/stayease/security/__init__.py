# Security module
from stayease.security.auth import (
    get_password_hash, verify_password, start_session, end_session,
    get_current_user, get_optional_user, require_admin
)

__all__ = [
    'get_password_hash', 'verify_password', 'start_session', 'end_session',
    'get_current_user', 'get_optional_user', 'require_admin'
]
