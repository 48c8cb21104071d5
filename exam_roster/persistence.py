import json
import logging
from contextlib import contextmanager
from functools import wraps

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from .db_models import AllocationDB, DatasetDB, RoomDB
from .errors import PersistenceFailure, ValidationFailure
from .models import AssignmentRecord, Room

logger = logging.getLogger(__name__)


def split_roll_numbers(raw):
    if not raw:
        return []
    return [part.strip() for part in raw.split(",")]


def _record_from_row(row):
    # the count is recomputed from the list so a record never disagrees with itself
    occupants = tuple(part for part in split_roll_numbers(row.roll_numbers) if part)
    return AssignmentRecord(
        row.room_id,
        occupants,
        len(occupants),
        row.subject,
        row.capacity,
    )


def _wrap_errors(func):
    operation = func.__name__

    @wraps(func)
    def wrapper(self, *args, **kwargs):
        try:
            return func(self, *args, **kwargs)
        except SQLAlchemyError as exc:
            name = args[0] if args else None
            logger.exception("Persistence operation %s failed for %r", operation, name)
            raise PersistenceFailure(
                f"Persistence operation '{operation}' failed: {exc.__class__.__name__}",
                operation=operation,
                target=name,
            ) from exc
    return wrapper


class SqlAlchemyPersistence:
    """
    Fixed-schema storage for room catalogs and per-subject datasets.

    Each call runs in its own session unless the instance was produced by
    `transaction()`, in which case all calls share that session and nothing is
    committed until the block exits cleanly.
    """

    def __init__(self, database, session=None):
        self.database = database
        self._session = session

    @contextmanager
    def _db(self):
        if self._session is not None:
            yield self._session
            return

        db = self.database.session()
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    @contextmanager
    def transaction(self):
        if self._session is not None:
            yield self
            return

        db = self.database.session()
        try:
            yield SqlAlchemyPersistence(self.database, session = db)
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception("Transaction rolled back")
            raise PersistenceFailure(
                f"Transaction failed: {exc.__class__.__name__}", operation="transaction"
            ) from exc
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    # room catalog

    @_wrap_errors
    def list_rooms(self):
        with self._db() as db:
            rooms = db.query(RoomDB).order_by(RoomDB.id).all()
            return [Room(r.room_id, r.capacity) for r in rooms]

    @_wrap_errors
    def get_room(self, room_id):
        with self._db() as db:
            room = db.query(RoomDB).filter(RoomDB.room_id == room_id).first()
            if not room:
                return None
            return {
                "room_id": room.room_id,
                "capacity": room.capacity,
                "seats_per_bench": room.seats_per_bench,
                "layout": json.loads(room.layout_json) if room.layout_json else None,
            }

    @_wrap_errors
    def add_room(self, room_id, capacity, seats_per_bench=None, layout=None):
        if capacity < 0:
            raise ValidationFailure("Room capacity must not be negative", room_id=room_id, capacity=capacity)

        with self._db() as db:
            existing = db.query(RoomDB).filter(RoomDB.room_id == room_id).first()
            if existing:
                raise ValidationFailure(f"Room {room_id} already exists", room_id=room_id)

            room = RoomDB(
                room_id = room_id,
                capacity = capacity,
                seats_per_bench = seats_per_bench,
                layout_json = json.dumps(layout) if layout is not None else None,
            )
            db.add(room)
            try:
                db.flush()
            except IntegrityError as exc:
                raise ValidationFailure(f"Room {room_id} already exists", room_id=room_id) from exc
            return Room(room_id, capacity)

    @_wrap_errors
    def delete_room(self, room_id):
        with self._db() as db:
            deleted = db.query(RoomDB).filter(RoomDB.room_id == room_id).delete()
            return deleted > 0

    # datasets

    @_wrap_errors
    def dataset_exists(self, name):
        with self._db() as db:
            return db.query(DatasetDB.id).filter(DatasetDB.name == name).first() is not None

    @_wrap_errors
    def destroy_dataset(self, name):
        with self._db() as db:
            dataset = db.query(DatasetDB).filter(DatasetDB.name == name).first()
            if dataset is None:
                return False
            db.delete(dataset)
            db.flush()
            return True

    @_wrap_errors
    def create_dataset(self, name, subject):
        with self._db() as db:
            db.add(DatasetDB(name = name, subject = subject))
            db.flush()

    @_wrap_errors
    def bulk_insert(self, name, records):
        with self._db() as db:
            dataset = db.query(DatasetDB).filter(DatasetDB.name == name).one()
            for position, record in enumerate(records):
                db.add(AllocationDB(
                    dataset_id = dataset.id,
                    position = position,
                    room_id = record.room_id,
                    capacity = record.capacity if record.capacity is not None else record.occupant_count,
                    roll_numbers = ", ".join(record.occupants),
                    question_paper_count = record.occupant_count,
                    subject = record.subject,
                ))
            db.flush()

    @_wrap_errors
    def select_all(self, name):
        with self._db() as db:
            rows = (
                db.query(AllocationDB)
                .join(DatasetDB, AllocationDB.dataset_id == DatasetDB.id)
                .filter(DatasetDB.name == name)
                .order_by(AllocationDB.position)
                .all()
            )
            return [_record_from_row(row) for row in rows]

    @_wrap_errors
    def select_one(self, name, room_id):
        """Raw stored row for one room as a dict, or None when there is no such row."""
        with self._db() as db:
            row = (
                db.query(AllocationDB)
                .join(DatasetDB, AllocationDB.dataset_id == DatasetDB.id)
                .filter(DatasetDB.name == name)
                .filter(AllocationDB.room_id == room_id)
                .first()
            )
            if row is None:
                return None
            return {
                "room_id": row.room_id,
                "roll_numbers": split_roll_numbers(row.roll_numbers),
                "question_paper_count": row.question_paper_count,
                "subject": row.subject,
                "capacity": row.capacity,
            }

    @_wrap_errors
    def update_one(self, name, room_id, occupants, count):
        with self._db() as db:
            dataset = db.query(DatasetDB).filter(DatasetDB.name == name).first()
            if dataset is None:
                return 0
            updated = (
                db.query(AllocationDB)
                .filter(AllocationDB.dataset_id == dataset.id)
                .filter(AllocationDB.room_id == room_id)
                .update(
                    {"roll_numbers": ",".join(occupants), "question_paper_count": count},
                    synchronize_session = False,
                )
            )
            return updated

    @_wrap_errors
    def list_dataset_names(self):
        with self._db() as db:
            return [name for (name,) in db.query(DatasetDB.name).order_by(DatasetDB.name).all()]
