"""
WordLog Backend — Application Package Initializer
==================================================

What: Marks the `app` directory as a Python package.
Why:  Enables module imports like `from app.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by pytest and uvicorn.

Architecture Note:
    This backend follows a clean layered architecture:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │        Services (Record Store)      │  ← Create / list operations
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← Field rules + Pydantic
    ├─────────────────────────────────────┤
    │     Database (Connection Manager)   │  ← Single Motor client
    └─────────────────────────────────────┘

    Routes never talk to MongoDB directly. Validation lives in models/ so it
    can be exercised without a running database.
"""

__version__ = "1.0.0"
