"""
Enrollment management for the School Directory.

Owns the rule that a student holds at most one enrollment per class.
Enrolling is idempotent: an existing enrollment counts as success.
Unenrolling is not: removing an enrollment that does not exist is NOT_FOUND.

The existence check and the insert are not atomic on their own. The unique
constraint on (student_id, class_id) is what settles concurrent enrolls; a
conflict raised by the store is re-read and, if the row is there, treated as
"already enrolled".
"""
import logging

from database import Enrollment, Role
from database.store import DirectoryStore
from .exceptions import ConflictError
from .outcome import Outcome

logger = logging.getLogger(__name__)


class EnrollmentManager:
    """Creates and removes enrollments."""

    def __init__(self, store: DirectoryStore):
        self.store = store

    def enroll(self, student_id: int, class_id: int) -> Outcome:
        """
        Enroll a student in a class.

        Args:
            student_id: The enrolling student
            class_id: The class to join

        Returns:
            SUCCESS whether the enrollment was created or already existed,
            NOT_FOUND if the class does not exist
        """
        if self.store.get_class(class_id) is None:
            return Outcome.not_found(f"Class with id {class_id} not found")

        if self.store.exists_enrollment(student_id, class_id):
            logger.info("Student %s already enrolled in class %s", student_id, class_id)
            return Outcome.success(_enrollment_data(student_id, class_id))

        try:
            self.store.save_enrollment(Enrollment(student_id=student_id, class_id=class_id))
        except ConflictError as e:
            if self.store.exists_enrollment(student_id, class_id):
                logger.info(
                    "Concurrent enroll of student %s in class %s resolved as already enrolled",
                    student_id, class_id,
                )
                return Outcome.success(_enrollment_data(student_id, class_id))
            if self.store.get_class(class_id) is None:
                return Outcome.not_found(f"Class with id {class_id} not found")
            logger.warning("Enroll of student %s in class %s conflicted: %s", student_id, class_id, e)
            return Outcome.conflict(e.message)

        logger.info("Student %s enrolled in class %s", student_id, class_id)
        return Outcome.success(_enrollment_data(student_id, class_id))

    def unenroll(self, student_id: int, class_id: int) -> Outcome:
        """
        Remove a student's own enrollment.

        Returns:
            SUCCESS if an enrollment was deleted, NOT_FOUND otherwise
        """
        return self._delete_pair(student_id, class_id)

    def remove_student(self, teacher_id: int, class_id: int, student_id: int) -> Outcome:
        """
        Remove a student from a class on behalf of its teacher.

        Ownership of the class is checked by the caller before this runs.

        Returns:
            SUCCESS if an enrollment was deleted, NOT_FOUND if the student
            does not exist, is not a student, or is not enrolled
        """
        student = self.store.get_principal(student_id)
        if student is None or student.role != Role.STUDENT:
            return Outcome.not_found(f"Student with id {student_id} not found")

        outcome = self._delete_pair(student_id, class_id)
        if outcome.ok:
            logger.info("Teacher %s removed student %s from class %s", teacher_id, student_id, class_id)
        return outcome

    def _delete_pair(self, student_id: int, class_id: int) -> Outcome:
        enrollment = self.store.find_enrollment(student_id, class_id)
        if enrollment is None or not self.store.delete_enrollment(enrollment):
            return Outcome.not_found(
                f"Student {student_id} is not enrolled in class {class_id}"
            )
        logger.info("Enrollment of student %s in class %s deleted", student_id, class_id)
        return Outcome.success(_enrollment_data(student_id, class_id))


def _enrollment_data(student_id: int, class_id: int) -> dict:
    return {"student_id": student_id, "class_id": class_id}
