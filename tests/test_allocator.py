import pytest

from exam_roster.allocator import allocate
from exam_roster.errors import NoRoomsAvailable, ValidationFailure
from exam_roster.models import AssignmentRecord, Room, StudentRecord

from conftest import students

ROOMS = [Room("A", 2), Room("B", 3)]


def test_fills_rooms_in_catalog_order():
    result = allocate(students("s1", "s2", "s3", "s4"), ROOMS, "Math")
    assert result == [
        AssignmentRecord("A", ("s1", "s2"), 2, "Math", 2),
        AssignmentRecord("B", ("s3", "s4"), 2, "Math", 3),
    ]


def test_students_beyond_capacity_are_not_seated():
    result = allocate(students("s1", "s2", "s3", "s4", "s5", "s6"), ROOMS, "Math")
    assert [r.occupants for r in result] == [("s1", "s2"), ("s3", "s4", "s5")]
    assert [r.occupant_count for r in result] == [2, 3]


def test_rooms_after_students_run_out_get_empty_records():
    rooms = [Room("A", 2), Room("B", 3), Room("C", 4)]
    result = allocate(students("s1"), rooms, "Math")
    assert [r.room_id for r in result] == ["A", "B", "C"]
    assert [r.occupant_count for r in result] == [1, 0, 0]
    assert result[2].occupants == ()


def test_empty_student_list_gives_one_empty_record_per_room():
    result = allocate([], ROOMS, "Math")
    assert len(result) == 2
    assert all(r.occupant_count == 0 for r in result)


def test_no_rooms_is_an_error():
    with pytest.raises(NoRoomsAvailable):
        allocate(students("s1"), [], "Math")


def test_zero_capacity_room_stays_empty():
    rooms = [Room("A", 0), Room("B", 2)]
    result = allocate(students("s1", "s2", "s3"), rooms, "Math")
    assert result[0].occupants == ()
    assert result[1].occupants == ("s1", "s2")


def test_duplicates_are_kept_in_position():
    result = allocate(students("s1", "s1", "s2"), ROOMS, "Math")
    assert result[0].occupants == ("s1", "s1")
    assert result[1].occupants == ("s2",)


def test_deterministic():
    s = students(*[f"r{i}" for i in range(12)])
    rooms = [Room("X", 5), Room("Y", 1), Room("Z", 4)]
    assert allocate(s, rooms, "Physics") == allocate(s, rooms, "Physics")


@pytest.mark.parametrize("count", [0, 1, 4, 5, 9, 20])
def test_total_seated_and_room_limits(count):
    rooms = [Room("A", 2), Room("B", 0), Room("C", 3), Room("D", 4)]
    result = allocate(students(*[f"s{i}" for i in range(count)]), rooms, "Chem")
    assert sum(r.occupant_count for r in result) == min(count, 9)
    for room, record in zip(rooms, result):
        assert record.occupant_count <= room.capacity
        assert record.occupant_count == len(record.occupants)


def test_missing_roll_number_is_rejected():
    with pytest.raises(ValidationFailure):
        allocate([StudentRecord(roll_no = "s1"), StudentRecord(roll_no = "  ")], ROOMS, "Math")


def test_negative_capacity_is_rejected():
    with pytest.raises(ValidationFailure):
        allocate(students("s1"), [Room("A", -1)], "Math")


def test_record_count_must_match_occupants():
    with pytest.raises(ValueError):
        AssignmentRecord("A", ("s1", "s2"), 1, "Math")


def test_roll_number_with_comma_is_rejected():
    with pytest.raises(ValidationFailure):
        allocate(students("a,b", "c", "d"), ROOMS, "Math")


def test_unseated_records_are_checked_too():
    with pytest.raises(ValidationFailure):
        allocate(students("s1", "s2", "s3", "s4", "s5", ""), ROOMS, "Math")
