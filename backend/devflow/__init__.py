"""
DevFlow Backend — Application Package
=======================================

Q&A forum API: questions, answers, tags, votes, saved collections, users
and accounts.

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP → action → envelope
    ├─────────────────────────────────────┤
    │   Services (actions via the guard)  │  ← validate, authorize, run
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │     DocumentStore (Persistence)     │  ← async sessions, transactions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
