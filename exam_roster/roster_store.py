import logging

from .allocator import allocate
from .config import DEFAULT_DATASET_PREFIX
from .errors import DatasetNotFound, NoRoomsAvailable, OccupantNotFound, RecordNotFound, ValidationFailure
from .naming import canonicalize, check_roll_number

logger = logging.getLogger(__name__)


def normalize_occupants(occupants):
    """Trim entries, drop blanks and duplicates, keep first-seen order."""
    seen = set()
    cleaned = []
    for occupant in occupants:
        occupant = (occupant or "").strip()
        if occupant and occupant not in seen:
            seen.add(occupant)
            cleaned.append(occupant)
    return cleaned


class RosterStore:
    """
    Lifecycle of the per-subject datasets produced by allocation runs.

    Datasets are addressed by subject label; the label is canonicalized once
    per call and that name is the only key used against persistence. Edits are
    fetch-then-write: two concurrent edits of one room resolve as
    last-writer-wins.
    """

    def __init__(self, persistence, prefix=DEFAULT_DATASET_PREFIX):
        self.persistence = persistence
        self.prefix = prefix

    def canonical_name(self, subject):
        return canonicalize(subject, self.prefix)

    def allocate_subject(self, subject, students):
        if not students:
            raise ValidationFailure("No students to allocate", subject=subject)
        name = self.canonical_name(subject)
        rooms = self.persistence.list_rooms()
        assignments = allocate(students, rooms, subject)
        self.create_or_replace(subject, assignments)
        return self.persistence.select_all(name)

    def create_or_replace(self, subject, assignments):
        name = self.canonical_name(subject)
        if not assignments:
            raise NoRoomsAvailable("Refusing to store an empty allocation", subject=subject, dataset=name)
        room_ids = [record.room_id for record in assignments]
        if len(set(room_ids)) != len(room_ids):
            raise ValidationFailure("Duplicate room in allocation", dataset=name)

        with self.persistence.transaction() as tx:
            if tx.destroy_dataset(name):
                logger.info("Dataset %s exists, recreating", name)
            tx.create_dataset(name, subject)
            tx.bulk_insert(name, assignments)

        logger.info("Stored %d room records in %s", len(assignments), name)
        return name

    def _require_dataset(self, name, subject):
        if not self.persistence.dataset_exists(name):
            raise DatasetNotFound(f"No allocation for subject {subject!r}", subject=subject, dataset=name)

    def _stored_row(self, subject, room_id):
        name = self.canonical_name(subject)
        row = self.persistence.select_one(name, room_id)
        if row is None:
            self._require_dataset(name, subject)
            raise RecordNotFound("Class not found.", subject=subject, dataset=name, room_id=room_id)
        return name, row

    def fetch(self, subject, room_id):
        _, row = self._stored_row(subject, room_id)
        return [occupant for occupant in row["roll_numbers"] if occupant]

    def fetch_dataset(self, subject):
        name = self.canonical_name(subject)
        self._require_dataset(name, subject)
        return self.persistence.select_all(name)

    def remove_occupant(self, subject, room_id, identifier):
        name, row = self._stored_row(subject, room_id)
        identifier = (identifier or "").strip()
        current = normalize_occupants(row["roll_numbers"])

        if identifier not in current:
            raise OccupantNotFound(
                "Roll number not found in class",
                subject=subject,
                dataset=name,
                room_id=room_id,
                roll_number=identifier,
            )

        remaining = [occupant for occupant in current if occupant != identifier]
        self._write(name, subject, room_id, remaining)
        logger.info("Removed %s from %s in %s", identifier, room_id, name)
        return remaining

    def add_occupant(self, subject, room_id, identifier):
        name, row = self._stored_row(subject, room_id)
        identifier = check_roll_number(identifier, subject=subject, room_id=room_id)

        current = normalize_occupants(row["roll_numbers"])
        if identifier in current:
            raise ValidationFailure(
                "Roll number already in class", subject=subject, room_id=room_id, roll_number=identifier
            )
        if len(current) >= row["capacity"]:
            raise ValidationFailure(
                "Class is full", subject=subject, room_id=room_id, capacity=row["capacity"]
            )

        current.append(identifier)
        self._write(name, subject, room_id, current)
        logger.info("Added %s to %s in %s", identifier, room_id, name)
        return current

    def replace_occupants(self, subject, room_id, identifiers):
        name, row = self._stored_row(subject, room_id)
        # the storage format is comma-joined, so blanks cannot survive a round trip
        occupants = [(occupant or "").strip() for occupant in identifiers]
        occupants = [
            check_roll_number(occupant, subject=subject, room_id=room_id)
            for occupant in occupants
            if occupant
        ]

        if len(occupants) > row["capacity"]:
            raise ValidationFailure(
                f"{len(occupants)} roll numbers exceed the capacity of {room_id}",
                subject=subject,
                room_id=room_id,
                capacity=row["capacity"],
            )

        self._write(name, subject, room_id, occupants)
        logger.info("Replaced occupants of %s in %s (%d)", room_id, name, len(occupants))
        return occupants

    def _write(self, name, subject, room_id, occupants):
        updated = self.persistence.update_one(name, room_id, occupants, len(occupants))
        if not updated:
            # dropped or re-allocated between the read and the write
            self._require_dataset(name, subject)
            raise RecordNotFound("No records updated", subject=subject, dataset=name, room_id=room_id)

    def drop(self, subject):
        name = self.canonical_name(subject)
        dropped = self.persistence.destroy_dataset(name)
        if dropped:
            logger.info("Dropped %s", name)
        else:
            logger.info("Drop requested for %s, nothing to do", name)
        return name

    def dataset_names(self):
        return self.persistence.list_dataset_names()

    def snapshot(self):
        return {name: self.persistence.select_all(name) for name in self.persistence.list_dataset_names()}
