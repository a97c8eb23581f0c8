"""
Service layer for business logic.

This package contains the service that evaluates a parsed payment
instruction against the supplied accounts and builds the result.
"""
