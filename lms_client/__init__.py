"""
Async client for the learning-platform REST backend.

Bounded contexts:
    identity_access  session lifecycle, roles, persisted state, signup
    learning         learner id resolution and enrollment state
    teaching         course tree aggregation and author services
"""

__version__ = "0.1.0"
