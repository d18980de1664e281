"""
Car Store Backend — Application Package
=========================================

Layered architecture:

    ┌─────────────────────────────────────┐
    │        Routes (Controllers)         │  ← validate, delegate, wrap envelope
    ├─────────────────────────────────────┤
    │     Validation (app.validation)     │  ← pydantic rules → per-field errors
    ├─────────────────────────────────────┤
    │       Services (Data Access)        │  ← CarService, OrderService
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
