"""
Directory store for the School Directory.

Wraps a SQLAlchemy session behind the narrow query/command interface the
directory core depends on. Every write commits its own unit of work.
Integrity violations surface as ConflictError, any other database failure
as StoreUnavailable. Both roll the session back first.
"""
import logging
from contextlib import contextmanager
from typing import Dict, Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from .exceptions import ConflictError, StoreUnavailable
from .models import Enrollment, Principal, SchoolClass

logger = logging.getLogger(__name__)


class DirectoryStore:
    """
    Persistent store for principals, classes and enrollments.
    """

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _guard(self, operation: str):
        try:
            yield
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError(str(e.orig) if e.orig is not None else str(e), operation=operation) from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Store operation %s failed: %s", operation, e)
            raise StoreUnavailable(f"Store operation '{operation}' failed", operation=operation) from e

    def _commit(self, entity, operation: str):
        with self._guard(operation):
            self.db.add(entity)
            self.db.commit()
            self.db.refresh(entity)
        return entity

    def _remove(self, entity, operation: str) -> None:
        with self._guard(operation):
            self.db.delete(entity)
            self.db.commit()

    # ---------- Principals ----------

    def get_principal(self, principal_id: int) -> Optional[Principal]:
        with self._guard("get_principal"):
            return self.db.get(Principal, principal_id)

    def find_principal_by_username(self, username: str) -> Optional[Principal]:
        with self._guard("find_principal_by_username"):
            return (
                self.db.query(Principal)
                .filter(Principal.username == username)
                .first()
            )

    def list_principals_by_role(self, role: str) -> List[Principal]:
        with self._guard("list_principals_by_role"):
            return (
                self.db.query(Principal)
                .filter(Principal.role == role)
                .order_by(Principal.name, Principal.id)
                .all()
            )

    def save_principal(self, principal: Principal) -> Principal:
        return self._commit(principal, "save_principal")

    def delete_principal(self, principal: Principal) -> None:
        """Delete a principal; its enrollments go with it."""
        self._remove(principal, "delete_principal")

    def delete_teacher(self, teacher: Principal, classes: Iterable[SchoolClass] = ()) -> None:
        """
        Delete a teacher together with the given owned classes and their
        enrollments, in a single commit.

        Raises:
            ConflictError: if the teacher still owns a class not in `classes`;
                nothing is deleted in that case
        """
        classes = list(classes)
        with self._guard("delete_teacher"):
            if classes:
                for enrollment in (
                    self.db.query(Enrollment)
                    .filter(Enrollment.class_id.in_([c.id for c in classes]))
                    .all()
                ):
                    self.db.delete(enrollment)
                for school_class in classes:
                    self.db.delete(school_class)
                # Classes must be gone before the owner row is deleted
                self.db.flush()
            self.db.delete(teacher)
            self.db.commit()

    # ---------- Classes ----------

    def get_class(self, class_id: int) -> Optional[SchoolClass]:
        with self._guard("get_class"):
            return self.db.get(SchoolClass, class_id, options=[joinedload(SchoolClass.owner)])

    def list_classes_by_owner(self, owner_id: int) -> List[SchoolClass]:
        with self._guard("list_classes_by_owner"):
            return (
                self.db.query(SchoolClass)
                .options(joinedload(SchoolClass.owner))
                .filter(SchoolClass.owner_id == owner_id)
                .order_by(SchoolClass.name, SchoolClass.id)
                .all()
            )

    def list_all_classes(self) -> List[SchoolClass]:
        with self._guard("list_all_classes"):
            return (
                self.db.query(SchoolClass)
                .options(joinedload(SchoolClass.owner))
                .order_by(SchoolClass.name, SchoolClass.id)
                .all()
            )

    def save_class(self, school_class: SchoolClass) -> SchoolClass:
        return self._commit(school_class, "save_class")

    def delete_class(self, school_class: SchoolClass) -> None:
        """Delete a class together with every enrollment referencing it."""
        with self._guard("delete_class"):
            for enrollment in (
                self.db.query(Enrollment)
                .filter(Enrollment.class_id == school_class.id)
                .all()
            ):
                self.db.delete(enrollment)
            self.db.delete(school_class)
            self.db.commit()

    # ---------- Enrollments ----------

    def find_enrollment(self, student_id: int, class_id: int) -> Optional[Enrollment]:
        with self._guard("find_enrollment"):
            return (
                self.db.query(Enrollment)
                .filter(Enrollment.student_id == student_id)
                .filter(Enrollment.class_id == class_id)
                .first()
            )

    def exists_enrollment(self, student_id: int, class_id: int) -> bool:
        return self.find_enrollment(student_id, class_id) is not None

    def list_enrollments_by_student(self, student_id: int) -> List[Enrollment]:
        with self._guard("list_enrollments_by_student"):
            return (
                self.db.query(Enrollment)
                .filter(Enrollment.student_id == student_id)
                .all()
            )

    def list_enrollments_by_class(self, class_id: int) -> List[Enrollment]:
        with self._guard("list_enrollments_by_class"):
            return (
                self.db.query(Enrollment)
                .filter(Enrollment.class_id == class_id)
                .all()
            )

    def list_students_by_class(self, class_id: int) -> List[Principal]:
        """Students enrolled in a class, loaded in one query."""
        with self._guard("list_students_by_class"):
            return (
                self.db.query(Principal)
                .join(Enrollment, Principal.id == Enrollment.student_id)
                .filter(Enrollment.class_id == class_id)
                .order_by(Principal.name, Principal.id)
                .all()
            )

    def count_enrollments_by_class(self, class_ids: Iterable[int]) -> Dict[int, int]:
        """Live enrollment count per class id; classes without rows map to 0."""
        class_ids = list(class_ids)
        if not class_ids:
            return {}
        with self._guard("count_enrollments_by_class"):
            rows = (
                self.db.query(Enrollment.class_id, func.count(Enrollment.id))
                .filter(Enrollment.class_id.in_(class_ids))
                .group_by(Enrollment.class_id)
                .all()
            )
        counts = {class_id: 0 for class_id in class_ids}
        counts.update({class_id: count for class_id, count in rows})
        return counts

    def save_enrollment(self, enrollment: Enrollment) -> Enrollment:
        return self._commit(enrollment, "save_enrollment")

    def delete_enrollment(self, enrollment: Enrollment) -> bool:
        """
        Delete an enrollment row.

        Returns:
            False if the row was already gone (e.g. a concurrent unenroll)
        """
        with self._guard("delete_enrollment"):
            deleted = (
                self.db.query(Enrollment)
                .filter(Enrollment.id == enrollment.id)
                .delete(synchronize_session="fetch")
            )
            self.db.commit()
        return deleted > 0


def get_directory_store(db: Session) -> DirectoryStore:
    """Factory function to create DirectoryStore."""
    return DirectoryStore(db)
