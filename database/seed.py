"""
Seed data script for the School Directory.
Creates the bootstrap accounts and optional demo data.
"""
import logging

from sqlalchemy.orm import Session

from .connection import get_db_context, init_db
from .models import Enrollment, Principal, Role, SchoolClass

logger = logging.getLogger(__name__)

DEFAULT_TEACHER = {
    "username": "teacher",
    "name": "Sumaiya Akter",
    "role": Role.TEACHER.value,
}

DEFAULT_STUDENT = {
    "username": "student",
    "name": "Default Student",
    "email": "student@school.com",
    "grade": "A",
    "role": Role.STUDENT.value,
}


def _get_or_create(db: Session, fields: dict) -> Principal:
    principal = db.query(Principal).filter_by(username=fields["username"]).first()
    if principal is None:
        principal = Principal(**fields)
        db.add(principal)
        db.flush()
        logger.info("Seeded %s account '%s'", fields["role"], fields["username"])
    return principal


def seed_defaults(db: Session) -> dict:
    """
    Create the default teacher and student if their usernames are free.
    Safe to run on every startup.
    """
    teacher = _get_or_create(db, DEFAULT_TEACHER)
    student = _get_or_create(db, DEFAULT_STUDENT)
    db.commit()
    return {"teacher_id": teacher.id, "student_id": student.id}


def seed_demo(db: Session) -> None:
    """Add a few classes owned by the default teacher, plus one enrollment."""
    ids = seed_defaults(db)

    if db.query(SchoolClass).filter_by(owner_id=ids["teacher_id"]).count():
        logger.info("Demo classes already present, skipping")
        return

    classes = [
        SchoolClass(name="Math 101", description="Algebra", owner_id=ids["teacher_id"]),
        SchoolClass(name="History 201", description="Modern history", owner_id=ids["teacher_id"]),
    ]
    db.add_all(classes)
    db.flush()

    db.add(Enrollment(student_id=ids["student_id"], class_id=classes[0].id))
    db.commit()
    logger.info("Seeded %d demo classes", len(classes))


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_db()
    with get_db_context() as db:
        seed_demo(db)
