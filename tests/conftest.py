"""Shared fixtures: every test gets a fresh in-memory store."""

import pytest

from finanzas.audit import AuditLogger
from finanzas.models.audit import AuditEvent
from finanzas.services.storage import InMemoryStore
from finanzas.session import SessionAuthority


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def audit_events() -> list[AuditEvent]:
    return []


@pytest.fixture
def audit_logger(audit_events) -> AuditLogger:
    return AuditLogger(sink=audit_events)


@pytest.fixture
def authority(store, audit_logger) -> SessionAuthority:
    return SessionAuthority(store, audit_logger)
