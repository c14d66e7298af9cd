"""
Licensing register domain.

Defines license records, their role/sector vocabularies and search queries.
"""

from siareg.contexts.registry.diagnostics import (
    AnomalyLogDiagnostics,
    DiagnosticsSink,
    LoguruDiagnostics,
)
from siareg.contexts.registry.errors import EmptyQueryError, RegisterError
from siareg.contexts.registry.models import (
    EXPIRY_SENTINEL,
    License,
    Role,
    Sector,
    classify_role,
    classify_sector,
)
from siareg.contexts.registry.query import (
    Query,
    SearchByLicense,
    SearchByName,
)

__all__ = [
    "AnomalyLogDiagnostics",
    "DiagnosticsSink",
    "LoguruDiagnostics",
    "EmptyQueryError",
    "RegisterError",
    "EXPIRY_SENTINEL",
    "License",
    "Role",
    "Sector",
    "classify_role",
    "classify_sector",
    "Query",
    "SearchByLicense",
    "SearchByName",
]
