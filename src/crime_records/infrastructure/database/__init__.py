"""Database layer"""

from .client import DatabaseClient, begin_snapshot, db_client, get_db
from .models import EvidenceDB, IncidentDB, UserDB

__all__ = [
    "DatabaseClient",
    "begin_snapshot",
    "db_client",
    "get_db",
    "EvidenceDB",
    "IncidentDB",
    "UserDB",
]
