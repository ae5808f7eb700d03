"""
User Service - Application Package Initializer
==============================================

What: Marks the `user_api` directory as a Python package.
Who:  Imported by uvicorn (through `user_api.main`), pytest and the console script.

Architecture Note:
    The service is split into thin layers:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  <- HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services + Validation (Logic)     │  <- payload parsing, rules
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  <- SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │     Database gateway (Persistence)  │  <- Async SQLAlchemy engine
    └─────────────────────────────────────┘

    The gateway is created once by the bootstrap in `main.py` and handed to
    the routes through FastAPI's dependency injection, so every layer can be
    tested with a substitute.
"""

__version__ = "1.0.0"
