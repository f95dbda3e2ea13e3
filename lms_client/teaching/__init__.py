from .aggregation import CourseTree, aggregate
from .courses import CourseContent, CourseService, EnrollmentStat

__all__ = ["CourseTree", "aggregate", "CourseContent", "CourseService", "EnrollmentStat"]
