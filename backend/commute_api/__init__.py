"""
Commute Match Backend — Application Package Initializer
=======================================================

What: Marks the `commute_api` directory as a Python package.
Who:  Imported by uvicorn (`commute_api.main:app`), Alembic, and pytest.

Architecture Note:
    The backend is split into thin layers:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP envelopes and status codes
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Validation, enum checks, rules
    ├─────────────────────────────────────┤
    │     Repositories (Query Shaping)    │  ← Filters, CRUD, counts
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    └─────────────────────────────────────┘

    Services receive their repositories at construction; routes get services
    from the providers in `commute_api.dependencies`.
"""

__version__ = "1.0.0"
