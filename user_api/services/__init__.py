"""
User Service - Services Package
===============================

    - validation.py:    parse and check create-user payloads (pure)
    - user_service.py:  create/list orchestration over the database gateway
"""
