from __future__ import annotations

from lms_client.identity_access.stores import LEARNER_ID_KEY, InMemorySessionStore
from lms_client.learning.identity import IdentityResolver
from lms_client.models import Enrollment


def _enrollment(course_id, learner_id):
    return Enrollment(course_id=course_id, learner_id=learner_id, progress=0)


def test_cached_learner_id_wins_over_enrollments():
    store = InMemorySessionStore({LEARNER_ID_KEY: "cached"})
    resolver = IdentityResolver(store)

    assert resolver.resolve_learner_id([_enrollment(1, "other")]) == "cached"
    assert store.get(LEARNER_ID_KEY) == "cached"


def test_falls_back_to_first_enrollment_and_caches_it():
    store = InMemorySessionStore()
    resolver = IdentityResolver(store)

    learner_id = resolver.resolve_learner_id([_enrollment(1, "L-7"), _enrollment(2, "L-8")])

    assert learner_id == "L-7"
    assert store.get(LEARNER_ID_KEY) == "L-7"
    # Cache is populated now: an empty history still resolves.
    assert resolver.resolve_learner_id([]) == "L-7"


def test_not_found_without_cache_or_enrollments():
    store = InMemorySessionStore()
    resolver = IdentityResolver(store)

    assert resolver.resolve_learner_id([]) is None
    assert store.get(LEARNER_ID_KEY) is None


def test_first_enrollment_without_learner_id_is_not_found():
    store = InMemorySessionStore()
    resolver = IdentityResolver(store)

    assert resolver.resolve_learner_id([_enrollment(1, None), _enrollment(2, "L-2")]) is None
    assert store.get(LEARNER_ID_KEY) is None


def test_resolution_is_deterministic_for_same_state():
    enrollments = [_enrollment(3, "L-3")]
    results = [IdentityResolver(InMemorySessionStore()).resolve_learner_id(enrollments) for _ in range(3)]

    assert results == ["L-3", "L-3", "L-3"]
