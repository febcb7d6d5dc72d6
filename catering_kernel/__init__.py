"""
Catering Kernel

Shared foundation for the event financials engines:
- Structured JSON logging with request-scoped context
- Typed exceptions for rules-document errors
- Decimal money helpers and event-level domain types
"""

__version__ = "0.1.0"
