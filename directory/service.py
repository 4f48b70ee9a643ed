"""
Directory service for the School Directory.

Every public operation runs the same pipeline:
authorize -> mutate (enrollment manager or store) -> project -> Outcome.

The acting principal is always passed in explicitly; nothing here reads
ambient request state. StoreUnavailable raised by the store is never caught.
"""
import logging
from typing import Any, Literal, Optional, get_args

from database import Principal, Role, SchoolClass
from database.store import DirectoryStore
from .authorization import Action, is_allowed
from .enrollment import EnrollmentManager
from .exceptions import ConflictError
from .outcome import Outcome
from .payloads import ClassUpdate, NewClass, NewPrincipal, NewStudent, StudentUpdate, is_set
from .visibility import VisibilityProjector

logger = logging.getLogger(__name__)

TeacherDeletePolicy = Literal["forbid", "cascade"]

TEACHER_DELETE_POLICIES = get_args(TeacherDeletePolicy)


def _clean(value: Any) -> Optional[str]:
    """Trim a required text field; None if missing or blank."""
    if value is None:
        return None
    value = str(value).strip()
    return value or None


class DirectoryService:
    """
    Public operations of the directory.

    Args:
        store: Store the service reads and writes
        teacher_delete_policy: 'forbid' refuses to delete a teacher who still
            owns classes, 'cascade' deletes those classes first
    """

    def __init__(self, store: DirectoryStore, teacher_delete_policy: TeacherDeletePolicy = "forbid"):
        if teacher_delete_policy not in TEACHER_DELETE_POLICIES:
            raise ValueError(f"Unknown teacher delete policy: {teacher_delete_policy}")
        self.store = store
        self.teacher_delete_policy = teacher_delete_policy
        self.enrollments = EnrollmentManager(store)
        self.projector = VisibilityProjector(store)

    def _deny(self, actor: Principal, action: Action, target_id: Any = None) -> Outcome:
        logger.info("Denied %s for principal %s (target=%s)", action.value, actor.id, target_id)
        return Outcome.denied(f"Principal {actor.id} may not {action.value.replace('_', ' ')}")

    # ============== Classes ==============

    def list_classes(self, actor: Principal) -> Outcome:
        """Teachers: classes they own with counts. Students: all classes with enrolled flag."""
        if not is_allowed(actor, Action.LIST_CLASSES):
            return self._deny(actor, Action.LIST_CLASSES)
        if actor.role == Role.TEACHER:
            classes = self.store.list_classes_by_owner(actor.id)
        else:
            classes = self.store.list_all_classes()
        return Outcome.success(self.projector.classes(actor, classes))

    def get_class(self, actor: Principal, class_id: int) -> Outcome:
        school_class = self.store.get_class(class_id)
        if school_class is None:
            return Outcome.not_found(f"Class with id {class_id} not found")
        if not is_allowed(actor, Action.VIEW_CLASS, school_class):
            return self._deny(actor, Action.VIEW_CLASS, class_id)
        return Outcome.success(self.projector.class_detail(actor, school_class))

    def create_class(self, actor: Principal, payload: NewClass) -> Outcome:
        if not is_allowed(actor, Action.CREATE_CLASS):
            return self._deny(actor, Action.CREATE_CLASS)

        name = _clean(payload.name)
        if name is None:
            return Outcome.invalid("Class name must not be blank")

        school_class = self.store.save_class(
            SchoolClass(name=name, description=payload.description, owner_id=actor.id)
        )
        logger.info("Teacher %s created class %s", actor.id, school_class.id)
        return Outcome.success(self.projector.class_detail(actor, school_class))

    def update_class(self, actor: Principal, class_id: int, update: ClassUpdate) -> Outcome:
        """Patch name and/or description of a class the actor owns."""
        school_class = self.store.get_class(class_id)
        if school_class is None:
            return Outcome.not_found(f"Class with id {class_id} not found")
        if not is_allowed(actor, Action.UPDATE_CLASS, school_class):
            return self._deny(actor, Action.UPDATE_CLASS, class_id)

        if is_set(update.name):
            name = _clean(update.name)
            if name is None:
                return Outcome.invalid("Class name must not be blank")
            school_class.name = name
        if is_set(update.description):
            school_class.description = update.description

        school_class = self.store.save_class(school_class)
        logger.info("Teacher %s updated class %s", actor.id, class_id)
        return Outcome.success(self.projector.class_detail(actor, school_class))

    def delete_class(self, actor: Principal, class_id: int) -> Outcome:
        """Delete an owned class together with its enrollments."""
        school_class = self.store.get_class(class_id)
        if school_class is None:
            return Outcome.not_found(f"Class with id {class_id} not found")
        if not is_allowed(actor, Action.DELETE_CLASS, school_class):
            return self._deny(actor, Action.DELETE_CLASS, class_id)

        self.store.delete_class(school_class)
        logger.info("Teacher %s deleted class %s", actor.id, class_id)
        return Outcome.success()

    def list_class_students(self, actor: Principal, class_id: int) -> Outcome:
        """Roster of a class, for its owner only."""
        school_class = self.store.get_class(class_id)
        if school_class is None:
            return Outcome.not_found(f"Class with id {class_id} not found")
        if not is_allowed(actor, Action.LIST_CLASS_STUDENTS, school_class):
            return self._deny(actor, Action.LIST_CLASS_STUDENTS, class_id)
        return Outcome.success(self.projector.roster(school_class))

    # ============== Enrollment ==============

    def enroll(self, actor: Principal, class_id: int) -> Outcome:
        if not is_allowed(actor, Action.ENROLL):
            return self._deny(actor, Action.ENROLL, class_id)
        return self.enrollments.enroll(actor.id, class_id)

    def unenroll(self, actor: Principal, class_id: int) -> Outcome:
        if not is_allowed(actor, Action.UNENROLL):
            return self._deny(actor, Action.UNENROLL, class_id)
        return self.enrollments.unenroll(actor.id, class_id)

    def remove_student(self, actor: Principal, class_id: int, student_id: int) -> Outcome:
        school_class = self.store.get_class(class_id)
        if school_class is None:
            return Outcome.not_found(f"Class with id {class_id} not found")
        if not is_allowed(actor, Action.REMOVE_STUDENT, school_class):
            return self._deny(actor, Action.REMOVE_STUDENT, class_id)
        return self.enrollments.remove_student(actor.id, class_id, student_id)

    # ============== Students ==============

    def list_students(self, actor: Principal) -> Outcome:
        """Teachers: every student. Students: only themselves."""
        if not is_allowed(actor, Action.LIST_STUDENTS):
            return self._deny(actor, Action.LIST_STUDENTS)
        if actor.role == Role.TEACHER:
            students = self.store.list_principals_by_role(Role.STUDENT.value)
        else:
            own = self.store.get_principal(actor.id)
            students = [own] if own is not None else []
        return Outcome.success(self.projector.students(actor, students))

    def get_student(self, actor: Principal, student_id: int) -> Outcome:
        # Checked before the lookup so a student cannot probe which ids exist
        if not is_allowed(actor, Action.VIEW_STUDENT, student_id):
            return self._deny(actor, Action.VIEW_STUDENT, student_id)

        profile = self.projector.student(actor, self.store.get_principal(student_id))
        if profile is None:
            return Outcome.not_found(f"Student with id {student_id} not found")
        return Outcome.success(profile)

    def get_me(self, actor: Principal) -> Outcome:
        """The acting student's own profile. Teachers have none."""
        if actor.role != Role.STUDENT:
            return Outcome.not_found("Only students have a student profile")
        return self.get_student(actor, actor.id)

    def create_student(self, actor: Principal, payload: NewStudent) -> Outcome:
        if not is_allowed(actor, Action.CREATE_STUDENT):
            return self._deny(actor, Action.CREATE_STUDENT)

        outcome = self._register(actor, Role.STUDENT, payload)
        if outcome.ok:
            outcome = Outcome.success(outcome.data.to_dict())
        return outcome

    def create_principal(self, actor: Principal, payload: NewPrincipal) -> Outcome:
        """Register a teacher or a student. The role defaults to student."""
        if not is_allowed(actor, Action.CREATE_PRINCIPAL):
            return self._deny(actor, Action.CREATE_PRINCIPAL)

        role = _clean(payload.role) or Role.STUDENT.value
        if role.lower() not in {r.value for r in Role}:
            return Outcome.invalid(f"Unknown role: {role}")

        outcome = self._register(actor, Role(role.lower()), payload)
        if outcome.ok:
            principal = outcome.data
            outcome = Outcome.success({**principal.to_dict(), "role": principal.role})
        return outcome

    def _register(self, actor: Principal, role: Role, payload) -> Outcome:
        """Validate and save a new principal; the Outcome carries the entity."""
        username = _clean(payload.username)
        if username is None:
            return Outcome.invalid("Username must not be blank")
        if self.store.find_principal_by_username(username) is not None:
            return Outcome.invalid("Username already exists")

        principal = Principal(
            username=username,
            role=role.value,
            name=_clean(payload.name) or username,
            email=payload.email,
            grade=payload.grade,
        )
        try:
            principal = self.store.save_principal(principal)
        except ConflictError:
            return Outcome.invalid("Username already exists")

        logger.info("Teacher %s created %s %s", actor.id, role.value, principal.id)
        return Outcome.success(principal)

    def update_student(self, actor: Principal, student_id: int, update: StudentUpdate) -> Outcome:
        if not is_allowed(actor, Action.UPDATE_STUDENT):
            return self._deny(actor, Action.UPDATE_STUDENT, student_id)

        student = self.store.get_principal(student_id)
        if student is None or student.role != Role.STUDENT:
            return Outcome.not_found(f"Student with id {student_id} not found")

        if is_set(update.name):
            name = _clean(update.name)
            if name is None:
                return Outcome.invalid("Student name must not be blank")
            student.name = name
        if is_set(update.email):
            student.email = update.email
        if is_set(update.grade):
            student.grade = update.grade

        student = self.store.save_principal(student)
        logger.info("Teacher %s updated student %s", actor.id, student_id)
        return Outcome.success(student.to_dict())

    def delete_student(self, actor: Principal, student_id: int) -> Outcome:
        """Delete a student and all of their enrollments."""
        if not is_allowed(actor, Action.DELETE_STUDENT):
            return self._deny(actor, Action.DELETE_STUDENT, student_id)

        student = self.store.get_principal(student_id)
        if student is None or student.role != Role.STUDENT:
            return Outcome.not_found(f"Student with id {student_id} not found")

        self.store.delete_principal(student)
        logger.info("Teacher %s deleted student %s", actor.id, student_id)
        return Outcome.success()

    # ============== Teachers ==============

    def delete_teacher(self, actor: Principal, teacher_id: int) -> Outcome:
        """
        Delete a teacher account. Teachers may only delete themselves.

        What happens to owned classes depends on `teacher_delete_policy`.
        """
        if not is_allowed(actor, Action.DELETE_TEACHER, teacher_id):
            return self._deny(actor, Action.DELETE_TEACHER, teacher_id)

        teacher = self.store.get_principal(teacher_id)
        if teacher is None or teacher.role != Role.TEACHER:
            return Outcome.not_found(f"Teacher with id {teacher_id} not found")

        owned = self.store.list_classes_by_owner(teacher_id)
        if owned and self.teacher_delete_policy == "forbid":
            return Outcome.invalid(f"Teacher still owns {len(owned)} class(es)")

        try:
            self.store.delete_teacher(teacher, owned)
        except ConflictError as e:
            # A class was created for this teacher after the listing above;
            # the whole delete was rolled back
            return Outcome.conflict(e.message)

        logger.info("Teacher %s deleted (%d classes removed)", teacher_id, len(owned))
        return Outcome.success()


def get_directory_service(store: DirectoryStore, teacher_delete_policy: TeacherDeletePolicy = "forbid") -> DirectoryService:
    """Factory function to create DirectoryService."""
    return DirectoryService(store, teacher_delete_policy=teacher_delete_policy)
