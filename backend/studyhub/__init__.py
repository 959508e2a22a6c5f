"""
StudyHub Backend - Application Package
========================================

Payment, enrollment and profile services of the StudyHub e-learning
platform, plus the async HTTP client the platform's tooling uses to call
them.

    ┌─────────────────────────────────────┐
    │   Routes (FastAPI, /api/v1/...)     │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (payment, enrollment,    │  ← business rules
    │   profile) + external adapters      │
    ├─────────────────────────────────────┤
    │   Models & Schemas                  │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │   Database (async sessions)         │
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
