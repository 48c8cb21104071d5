import logging

from .errors import NoRoomsAvailable, ValidationFailure
from .models import AssignmentRecord
from .naming import check_roll_number

logger = logging.getLogger(__name__)


def allocate(students, rooms, subject):
    """
    Fill rooms in catalog order with consecutive slices of the student list.

    Every room consumes `capacity` positions of the list whether or not that
    many students are left, so once students run out the remaining rooms get
    empty records instead of being skipped. Students beyond the total capacity
    are not seated.
    """
    if not rooms:
        raise NoRoomsAvailable("No rooms available for allocation.", subject=subject)
    if subject is None or not str(subject).strip():
        raise ValidationFailure("Subject is required.")

    # every record is checked, including ones past the total capacity
    roll_numbers = [check_roll_number(student.roll_no, subject=subject) for student in students]

    allocation = []
    index = 0

    for room in rooms:
        if room.capacity < 0:
            raise ValidationFailure(
                "Room capacity must not be negative",
                room_id=room.room_id,
                capacity=room.capacity,
            )

        occupants = roll_numbers[index:index + room.capacity]

        allocation.append(AssignmentRecord.build(room.room_id, occupants, subject, room.capacity))
        index += room.capacity

    seated = min(len(students), index)
    logger.info(
        "Allocated %d of %d students for %r across %d rooms",
        seated, len(students), subject, len(rooms),
    )
    if len(students) > index:
        logger.warning("%d students for %r exceed total room capacity", len(students) - index, subject)

    return allocation
