"""
Resolve the acting learner's id.

The backend offers no "who am I as a learner" call, so the id is discovered:

1. the id cached in the session store, if any;
2. the learner id on the first known enrollment, which is then cached;
3. nothing (a learner without enrollments cannot be resolved yet).

Limitation: a cached id is never re-validated. If it changes server-side the
client keeps using the old one until the next logout clears the cache.
"""
from __future__ import annotations

from typing import Optional, Sequence
import logging

from ..identity_access.stores import LEARNER_ID_KEY, SessionStore
from ..models import Enrollment


LOG = logging.getLogger(__name__)


class IdentityResolver:
    def __init__(self, store: SessionStore) -> None:
        self._store = store

    def resolve_learner_id(self, enrollments: Sequence[Enrollment]) -> Optional[str]:
        cached = self._store.get(LEARNER_ID_KEY)
        if cached:
            return cached
        if enrollments and enrollments[0].learner_id:
            learner_id = enrollments[0].learner_id
            self._store.set(LEARNER_ID_KEY, learner_id)
            LOG.debug("Learner id resolved from enrollment history")
            return learner_id
        return None


__all__ = ["IdentityResolver"]
