"""
API routes for the School Directory.

Each endpoint resolves the requester from the database, calls one directory
operation and maps its Outcome onto an HTTP status.
"""
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from config import settings
from database import Principal, get_db
from database.store import DirectoryStore
from directory import (
    ClassUpdate,
    DirectoryService,
    NewClass,
    NewPrincipal,
    NewStudent,
    Outcome,
    OutcomeStatus,
    StudentUpdate,
    UnknownPrincipalError,
)
from .schemas import (
    ClassCreateRequest,
    ClassResponse,
    ClassUpdateRequest,
    EnrollmentResponse,
    PrincipalCreateRequest,
    PrincipalResponse,
    StudentCreateRequest,
    StudentResponse,
    StudentUpdateRequest,
)


# Router for class and enrollment endpoints
classes_router = APIRouter(prefix="/api/classes", tags=["Classes"])

# Router for student endpoints
students_router = APIRouter(prefix="/api/students", tags=["Students"])

# Router for teacher account endpoints
teachers_router = APIRouter(prefix="/api/teachers", tags=["Teachers"])

# Router for registering principals of either role
principals_router = APIRouter(prefix="/api/principals", tags=["Principals"])


STATUS_CODES = {
    OutcomeStatus.DENIED: status.HTTP_403_FORBIDDEN,
    OutcomeStatus.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    OutcomeStatus.INVALID: status.HTTP_400_BAD_REQUEST,
    OutcomeStatus.CONFLICT: status.HTTP_409_CONFLICT,
}


# ============== Dependencies ==============

def get_store(db: Session = Depends(get_db)) -> DirectoryStore:
    return DirectoryStore(db)


def get_service(store: DirectoryStore = Depends(get_store)) -> DirectoryService:
    return DirectoryService(store, teacher_delete_policy=settings.teacher_delete_policy)


def get_requester(requester_id: int, store: DirectoryStore = Depends(get_store)) -> Principal:
    """
    Resolve the acting principal.
    NEVER trust a client-provided role - it is always read from the database.
    """
    principal = store.get_principal(requester_id)
    if principal is None:
        raise UnknownPrincipalError(requester_id)
    return principal


def unwrap(outcome: Outcome):
    """Return the outcome payload or raise the matching HTTPException."""
    if outcome.ok:
        return outcome.data
    raise HTTPException(status_code=STATUS_CODES[outcome.status], detail=outcome.reason)


# ============== Class Endpoints ==============

@classes_router.get("", response_model=list[ClassResponse], response_model_exclude_none=True)
def list_classes(
    requester: Principal = Depends(get_requester),
    service: DirectoryService = Depends(get_service),
):
    """Teachers get their own classes with counts, students all classes with an enrolled flag."""
    return unwrap(service.list_classes(requester))


@classes_router.get("/{class_id}", response_model=ClassResponse, response_model_exclude_none=True)
def get_class(
    class_id: int,
    requester: Principal = Depends(get_requester),
    service: DirectoryService = Depends(get_service),
):
    return unwrap(service.get_class(requester, class_id))


@classes_router.post(
    "",
    response_model=ClassResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
def create_class(
    request: ClassCreateRequest,
    requester: Principal = Depends(get_requester),
    service: DirectoryService = Depends(get_service),
):
    """Create a class (Teacher only)."""
    payload = NewClass(name=request.name, description=request.description)
    return unwrap(service.create_class(requester, payload))


@classes_router.patch("/{class_id}", response_model=ClassResponse, response_model_exclude_none=True)
def update_class(
    class_id: int,
    request: ClassUpdateRequest,
    requester: Principal = Depends(get_requester),
    service: DirectoryService = Depends(get_service),
):
    """Update a class (owning teacher only). Absent fields are left unchanged."""
    update = ClassUpdate.from_fields(request.model_dump(exclude_unset=True))
    return unwrap(service.update_class(requester, class_id, update))


@classes_router.delete("/{class_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_class(
    class_id: int,
    requester: Principal = Depends(get_requester),
    service: DirectoryService = Depends(get_service),
):
    """Delete a class and its enrollments (owning teacher only)."""
    unwrap(service.delete_class(requester, class_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@classes_router.post("/{class_id}/enroll", response_model=EnrollmentResponse)
def enroll(
    class_id: int,
    requester: Principal = Depends(get_requester),
    service: DirectoryService = Depends(get_service),
):
    """Enroll the requesting student. Enrolling twice is not an error."""
    return unwrap(service.enroll(requester, class_id))


@classes_router.delete("/{class_id}/enroll", status_code=status.HTTP_204_NO_CONTENT)
def unenroll(
    class_id: int,
    requester: Principal = Depends(get_requester),
    service: DirectoryService = Depends(get_service),
):
    """Unenroll the requesting student. 404 if they were not enrolled."""
    unwrap(service.unenroll(requester, class_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@classes_router.get("/{class_id}/enrollments", response_model=list[StudentResponse])
def list_class_students(
    class_id: int,
    requester: Principal = Depends(get_requester),
    service: DirectoryService = Depends(get_service),
):
    """Students enrolled in a class (owning teacher only)."""
    return unwrap(service.list_class_students(requester, class_id))


@classes_router.delete("/{class_id}/enrollments/{student_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_student(
    class_id: int,
    student_id: int,
    requester: Principal = Depends(get_requester),
    service: DirectoryService = Depends(get_service),
):
    """Remove a student from a class (owning teacher only)."""
    unwrap(service.remove_student(requester, class_id, student_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ============== Student Endpoints ==============

@students_router.get("", response_model=list[StudentResponse])
def list_students(
    requester: Principal = Depends(get_requester),
    service: DirectoryService = Depends(get_service),
):
    """Teachers see every student, a student only themselves."""
    return unwrap(service.list_students(requester))


@students_router.get("/me", response_model=StudentResponse)
def get_me(
    requester: Principal = Depends(get_requester),
    service: DirectoryService = Depends(get_service),
):
    return unwrap(service.get_me(requester))


@students_router.get("/{student_id}", response_model=StudentResponse)
def get_student(
    student_id: int,
    requester: Principal = Depends(get_requester),
    service: DirectoryService = Depends(get_service),
):
    return unwrap(service.get_student(requester, student_id))


@students_router.post("", response_model=StudentResponse, status_code=status.HTTP_201_CREATED)
def create_student(
    request: StudentCreateRequest,
    requester: Principal = Depends(get_requester),
    service: DirectoryService = Depends(get_service),
):
    """Create a student (Teacher only)."""
    payload = NewStudent(
        username=request.username,
        name=request.name,
        email=request.email,
        grade=request.grade,
    )
    return unwrap(service.create_student(requester, payload))


@students_router.patch("/{student_id}", response_model=StudentResponse)
def update_student(
    student_id: int,
    request: StudentUpdateRequest,
    requester: Principal = Depends(get_requester),
    service: DirectoryService = Depends(get_service),
):
    """Update a student (Teacher only). Absent fields are left unchanged."""
    update = StudentUpdate.from_fields(request.model_dump(exclude_unset=True))
    return unwrap(service.update_student(requester, student_id, update))


@students_router.delete("/{student_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_student(
    student_id: int,
    requester: Principal = Depends(get_requester),
    service: DirectoryService = Depends(get_service),
):
    """Delete a student and their enrollments (Teacher only)."""
    unwrap(service.delete_student(requester, student_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ============== Teacher Endpoints ==============

@teachers_router.delete("/{teacher_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_teacher(
    teacher_id: int,
    requester: Principal = Depends(get_requester),
    service: DirectoryService = Depends(get_service),
):
    """Delete the requesting teacher's own account."""
    unwrap(service.delete_teacher(requester, teacher_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ============== Principal Endpoints ==============

@principals_router.post("", response_model=PrincipalResponse, status_code=status.HTTP_201_CREATED)
def create_principal(
    request: PrincipalCreateRequest,
    requester: Principal = Depends(get_requester),
    service: DirectoryService = Depends(get_service),
):
    """Register a teacher or a student (Teacher only). Role defaults to student."""
    payload = NewPrincipal(
        username=request.username,
        role=request.role,
        name=request.name,
        email=request.email,
        grade=request.grade,
    )
    return unwrap(service.create_principal(requester, payload))
