"""
Tests for role-based visibility of classes and profiles.
"""
from directory import EnrollmentManager, NewClass, VisibilityProjector


class TestClassVisibility:
    """Class lists differ by role."""

    def test_teacher_sees_only_owned_classes_with_counts(self, service, store, people, math_class):
        service.create_class(people.t2, NewClass(name="Art"))
        EnrollmentManager(store).enroll(people.s1.id, math_class["id"])
        EnrollmentManager(store).enroll(people.s2.id, math_class["id"])

        rows = VisibilityProjector(store).classes(people.t1, store.list_all_classes())

        assert [r["name"] for r in rows] == ["Math 101"]
        assert rows[0]["enrollment_count"] == 2
        assert "enrolled" not in rows[0]

    def test_teacher_with_no_classes_sees_nothing(self, store, people, math_class):
        assert VisibilityProjector(store).classes(people.t2, store.list_all_classes()) == []

    def test_student_sees_all_classes_with_own_flag(self, service, store, people, math_class):
        service.create_class(people.t2, NewClass(name="Art"))
        EnrollmentManager(store).enroll(people.s2.id, math_class["id"])

        rows = VisibilityProjector(store).classes(people.s1, store.list_all_classes())

        assert [r["name"] for r in rows] == ["Art", "Math 101"]
        # s2's enrollment must not show up as s1's
        assert all(r["enrolled"] is False for r in rows)
        assert all("enrollment_count" not in r for r in rows)

    def test_class_detail_by_role(self, store, people, math_class):
        EnrollmentManager(store).enroll(people.s1.id, math_class["id"])
        school_class = store.get_class(math_class["id"])
        projector = VisibilityProjector(store)

        assert projector.class_detail(people.t2, school_class)["enrollment_count"] == 1
        assert projector.class_detail(people.s1, school_class)["enrolled"] is True
        assert projector.class_detail(people.s2, school_class)["enrolled"] is False

    def test_enrolled_class_ids_empty_for_teacher(self, store, people):
        assert VisibilityProjector(store).enrolled_class_ids(people.t1) == set()


class TestProfileVisibility:
    """A student never receives another principal's personal data."""

    def test_student_gets_only_own_row_from_wider_list(self, store, people):
        everyone = [people.s1, people.s2, people.t1]

        rows = VisibilityProjector(store).students(people.s2, everyone)

        assert [r["id"] for r in rows] == [people.s2.id]

    def test_student_gets_nothing_if_absent_from_list(self, store, people):
        assert VisibilityProjector(store).students(people.s1, [people.s2]) == []

    def test_teacher_gets_every_student_but_no_teachers(self, store, people):
        rows = VisibilityProjector(store).students(people.t1, [people.s1, people.s2, people.t2])
        assert {r["id"] for r in rows} == {people.s1.id, people.s2.id}

    def test_foreign_profile_is_never_projected(self, store, people):
        projector = VisibilityProjector(store)
        assert projector.student(people.s1, people.s2) is None
        assert projector.student(people.s1, people.s1)["name"] == "Ana Costa"
        assert projector.student(people.t1, people.s2)["email"] == "pedro@school.com"
