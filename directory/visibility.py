"""
Visibility projection for the School Directory.

Shapes read results by role:
- Teachers see their own classes with enrollment counts, and every student
- Students see all classes flagged with their own enrollment, and only
  their own profile

CRITICAL: a student never receives another principal's personal data, even
if a caller hands this module a wider list.
"""
from typing import Any, Dict, Iterable, List, Optional, Set

from database import Principal, Role, SchoolClass
from database.store import DirectoryStore


class VisibilityProjector:
    """Filters and decorates directory data for the acting principal."""

    def __init__(self, store: DirectoryStore):
        self.store = store

    def enrolled_class_ids(self, student: Principal) -> Set[int]:
        """Class ids the student is enrolled in. Empty for teachers."""
        if student.role != Role.STUDENT:
            return set()
        return {e.class_id for e in self.store.list_enrollments_by_student(student.id)}

    def classes(self, actor: Principal, classes: Iterable[SchoolClass]) -> List[Dict[str, Any]]:
        """
        Project a class list.

        Teachers keep only the classes they own, each with
        `enrollment_count`. Students get every class with `enrolled`.
        """
        classes = list(classes)
        if actor.role == Role.TEACHER:
            owned = [c for c in classes if c.owner_id == actor.id]
            counts = self.store.count_enrollments_by_class(c.id for c in owned)
            return [
                {**c.to_dict(), "enrollment_count": counts.get(c.id, 0)}
                for c in owned
            ]

        enrolled_ids = self.enrolled_class_ids(actor)
        return [
            {**c.to_dict(), "enrolled": c.id in enrolled_ids}
            for c in classes
        ]

    def class_detail(self, actor: Principal, school_class: SchoolClass) -> Dict[str, Any]:
        """Project a single class for any principal."""
        data = school_class.to_dict()
        if actor.role == Role.TEACHER:
            counts = self.store.count_enrollments_by_class([school_class.id])
            data["enrollment_count"] = counts.get(school_class.id, 0)
        else:
            data["enrolled"] = self.store.exists_enrollment(actor.id, school_class.id)
        return data

    def students(self, actor: Principal, students: Iterable[Principal]) -> List[Dict[str, Any]]:
        """
        Project a student list.

        Teachers see every student. A student sees at most one row: their own.
        """
        students = [s for s in students if s.role == Role.STUDENT]
        if actor.role == Role.TEACHER:
            return [s.to_dict() for s in students]
        own = [s for s in students if s.id == actor.id]
        return [own[0].to_dict()] if own else []

    def student(self, actor: Principal, student: Principal) -> Optional[Dict[str, Any]]:
        """Project one profile, or None if the actor may not see it."""
        if student is None or student.role != Role.STUDENT:
            return None
        if actor.role != Role.TEACHER and actor.id != student.id:
            return None
        return student.to_dict()

    def roster(self, school_class: SchoolClass) -> List[Dict[str, Any]]:
        """Students enrolled in a class, for its owning teacher."""
        return [s.to_dict() for s in self.store.list_students_by_class(school_class.id)]
