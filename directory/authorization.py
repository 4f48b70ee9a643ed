"""
Authorization policy for the School Directory.

A single table maps every action to the rule deciding it. Rules are pure:
they look only at the acting principal and the already-fetched target,
never at the database.

RULES:
1. Role always comes from the stored principal, never from the client
2. Only the owning teacher may change, delete or inspect the roster of a class
3. Students enroll and unenroll only themselves
4. Students may view only their own profile
5. Only teachers register new principals, of either role
"""
from enum import Enum
from typing import Any, Callable, Dict, Optional

from database import Role


class Action(str, Enum):
    """Every operation the directory can authorize."""
    CREATE_CLASS = "create_class"
    UPDATE_CLASS = "update_class"
    DELETE_CLASS = "delete_class"
    LIST_CLASSES = "list_classes"
    VIEW_CLASS = "view_class"
    LIST_CLASS_STUDENTS = "list_class_students"
    ENROLL = "enroll"
    UNENROLL = "unenroll"
    REMOVE_STUDENT = "remove_student"
    LIST_STUDENTS = "list_students"
    VIEW_STUDENT = "view_student"
    CREATE_STUDENT = "create_student"
    UPDATE_STUDENT = "update_student"
    DELETE_STUDENT = "delete_student"
    CREATE_PRINCIPAL = "create_principal"
    DELETE_TEACHER = "delete_teacher"


Rule = Callable[[Any, Any], bool]


def _identity(target: Any) -> Any:
    """A target may be an entity or a bare id."""
    return getattr(target, "id", target)


def _any_principal(actor, target) -> bool:
    return True


def _teacher(actor, target) -> bool:
    return actor.role == Role.TEACHER


def _student(actor, target) -> bool:
    return actor.role == Role.STUDENT


def _class_owner(actor, target) -> bool:
    return (
        actor.role == Role.TEACHER
        and target is not None
        and actor.id == target.owner_id
    )


def _teacher_or_self(actor, target) -> bool:
    if actor.role == Role.TEACHER:
        return True
    return actor.role == Role.STUDENT and target is not None and actor.id == _identity(target)


def _teacher_self(actor, target) -> bool:
    return actor.role == Role.TEACHER and target is not None and actor.id == _identity(target)


POLICY: Dict[Action, Rule] = {
    Action.CREATE_CLASS: _teacher,
    Action.UPDATE_CLASS: _class_owner,
    Action.DELETE_CLASS: _class_owner,
    Action.LIST_CLASSES: _any_principal,
    Action.VIEW_CLASS: _any_principal,
    Action.LIST_CLASS_STUDENTS: _class_owner,
    Action.ENROLL: _student,
    Action.UNENROLL: _student,
    Action.REMOVE_STUDENT: _class_owner,
    Action.LIST_STUDENTS: _any_principal,
    Action.VIEW_STUDENT: _teacher_or_self,
    Action.CREATE_STUDENT: _teacher,
    Action.UPDATE_STUDENT: _teacher,
    Action.DELETE_STUDENT: _teacher,
    Action.CREATE_PRINCIPAL: _teacher,
    Action.DELETE_TEACHER: _teacher_self,
}


def is_allowed(actor, action: Action, target: Optional[Any] = None) -> bool:
    """
    Decide whether `actor` may perform `action` on `target`.

    Args:
        actor: The authenticated principal (anything with `id` and `role`)
        action: The action being attempted
        target: Already-fetched class or principal, a bare principal id,
            or None for actions without a target

    Returns:
        True if allowed. Unknown actions and a missing actor are denied.
    """
    if actor is None:
        return False
    rule = POLICY.get(action)
    if rule is None:
        return False
    return rule(actor, target)
