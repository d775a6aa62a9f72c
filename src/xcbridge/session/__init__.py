"""
Session defaults for xcbridge.

Agents set context once (project, scheme, simulator, ...) and every later
tool call reuses it. The store is an ordinary object: the dispatcher owns
one per process and passes it explicitly to every resolution, so tests and
multi-tenant hosts can use their own instances.
"""

from xcbridge.session.store import SESSION_EXCLUSIVE_PAIRS, SESSION_KEYS, SessionStore

__all__ = [
    "SESSION_EXCLUSIVE_PAIRS",
    "SESSION_KEYS",
    "SessionStore",
]
