"""
Shared utilities for the CodeAuth SDK.

This package aggregates the cross-cutting building blocks used by the
transport, the session cache and the client facade:

- config: SDK settings via pydantic-settings
- logging: Structured logging with request correlation
- metrics: Prometheus metrics helpers
- errors: Canonical exception types and responses

Do not import from codeauth.client or codeauth.adapters into shared/.
"""
