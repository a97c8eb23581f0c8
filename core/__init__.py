"""
Core modules for payment instruction processing.

This package contains:
- config: Application configuration and settings
- exceptions: Custom exception classes
- logger: Logging configuration
- messages: Status codes, statuses and reason texts
- parsing: Keyword-anchored instruction parser
- schema: Pydantic models for requests, parsed instructions and results
- validators: Amount, account id, date and currency checks
"""
