"""
db - Database layer.

Public API:
    init_db()       → create engine + tables
    dispose_db()    → drop engine (tests, shutdown)
    get_session()   → new Session
    ProjectRecord   → ORM model
"""

from db.engine import init_db, get_session, dispose_db   # noqa: F401
from db.models import Base, ProjectRecord           # noqa: F401
