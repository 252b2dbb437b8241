"""Session authority package."""

from finanzas.session.authority import (
    SEED_ADMIN,
    SESSION_KEY,
    USERS_KEY,
    SessionAuthority,
)

__all__ = ["SEED_ADMIN", "SESSION_KEY", "USERS_KEY", "SessionAuthority"]
