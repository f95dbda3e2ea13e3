from .enrollment import EnrollmentStore
from .identity import IdentityResolver

__all__ = ["EnrollmentStore", "IdentityResolver"]
