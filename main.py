import argparse
import logging
from pathlib import Path

from exam_roster.config import Settings
from exam_roster.database import Database
from exam_roster.errors import RosterError
from exam_roster.persistence import SqlAlchemyPersistence
from exam_roster.roster_store import RosterStore
from exam_roster.student_import import load_students

logger = logging.getLogger(__name__)


def room_spec(value):
    room_id, _, capacity = value.rpartition(":")
    if not room_id or not capacity.isdigit():
        raise argparse.ArgumentTypeError(f"expected ID:CAPACITY, got {value!r}")
    return room_id, int(capacity)


def main(argv=None):
    parser = argparse.ArgumentParser(description = "Allocate a subject's students to exam rooms.")
    parser.add_argument("students", help = "CSV or Excel file with a roll_no / RollNo column")
    parser.add_argument("--subject", required = True)
    parser.add_argument("--room", type = room_spec, action = "append", default = [], metavar = "ID:CAPACITY",
                        help = "add a room to the catalog before allocating (repeatable)")
    args = parser.parse_args(argv)

    settings = Settings.from_env()
    logging.basicConfig(level = settings.log_level, format = "%(levelname)s %(name)s: %(message)s")

    database = Database(settings.database_url)
    database.create_all()
    persistence = SqlAlchemyPersistence(database)
    store = RosterStore(persistence, settings.dataset_prefix)

    try:
        for room_id, capacity in args.room:
            if persistence.get_room(room_id) is None:
                persistence.add_room(room_id, capacity)
            else:
                logger.info("Room %s already in the catalog, keeping it", room_id)

        path = Path(args.students)
        try:
            content = path.read_bytes()
        except OSError as e:
            print(f"Cannot read {path}: {e.strerror}")
            return 1
        students = load_students(content, path.name, settings.max_upload_bytes)
        records = store.allocate_subject(args.subject, students)
    except RosterError as e:
        print(f"{e.kind}: {e.message}")
        return 1
    finally:
        database.dispose()

    print(f"\n--- Seat Allocation: {args.subject} ---")
    for r in records:
        print(f"Room {r.room_id} | {r.occupant_count} students | {', '.join(r.occupants) or '-'}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
