"""
Shared fixtures for the School Directory tests.

Each test gets its own file-backed SQLite database so that threads can open
independent sessions against it.
"""
from types import SimpleNamespace

import pytest
from sqlalchemy.orm import sessionmaker

from database import DirectoryStore, Principal, Role, create_directory_engine, init_db
from directory import DirectoryService, NewClass


@pytest.fixture
def engine(tmp_path):
    """Fresh database with all tables."""
    engine = create_directory_engine(f"sqlite:///{tmp_path / 'directory.db'}")
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store(db):
    return DirectoryStore(db)


@pytest.fixture
def service(store):
    return DirectoryService(store)


def add_principal(store, username, role, **fields):
    fields.setdefault("name", username.title())
    return store.save_principal(Principal(username=username, role=role.value, **fields))


@pytest.fixture
def people(store):
    """Two teachers and two students."""
    return SimpleNamespace(
        t1=add_principal(store, "t1", Role.TEACHER, name="Teacher One"),
        t2=add_principal(store, "t2", Role.TEACHER, name="Teacher Two"),
        s1=add_principal(store, "s1", Role.STUDENT, name="Ana Costa", email="ana@school.com", grade="A"),
        s2=add_principal(store, "s2", Role.STUDENT, name="Pedro Almeida", email="pedro@school.com", grade="B"),
    )


@pytest.fixture
def math_class(service, people):
    """'Math 101' owned by t1."""
    outcome = service.create_class(people.t1, NewClass(name="Math 101", description="Algebra"))
    assert outcome.ok
    return outcome.data
