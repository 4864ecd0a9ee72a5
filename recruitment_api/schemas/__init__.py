"""
Public Pydantic schemas used by FastAPI routes, services, and tests.

Row-level entities live in ``entities``; request/response models are grouped
by domain (auth, gyms, recruitment, tasks) next to the common envelopes,
filters and result wrappers.
"""

from .common import MessageResponse  # noqa: F401
