import logging
from contextlib import asynccontextmanager
from typing import Dict, List, Optional

from fastapi import Depends, FastAPI, File, Form, Request, UploadFile
from fastapi.responses import FileResponse, JSONResponse
from pydantic import BaseModel, Field

from .aggregator import aggregate_rows
from .config import Settings
from .database import Database
from .errors import DatasetNotFound, RosterError, ValidationFailure
from .exports import export_csv, export_excel, export_pdf
from .layouts import bench_labels, capacity_from_layout
from .persistence import SqlAlchemyPersistence
from .roster_store import RosterStore
from .student_import import load_students

logger = logging.getLogger(__name__)


class RoomCreate(BaseModel):
    room_id: str = Field(..., min_length = 1)
    capacity: Optional[int] = Field(None, ge = 0)
    seats_per_bench: int = Field(2, ge = 0)
    layout: Optional[Dict[str, int]] = None


class UpdateRequest(BaseModel):
    rollNumbers: List[str]
    uniqueID: str


class OccupantRequest(BaseModel):
    rollNumber: str
    uniqueID: str


class DropRequest(BaseModel):
    subject: str


def get_store(request: Request) -> RosterStore:
    return request.app.state.store


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def create_app(settings=None, database=None):
    settings = settings or Settings.from_env()
    logging.basicConfig(
        level = settings.log_level,
        format = "%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    database = database or Database(settings.database_url)
    database.create_all()

    @asynccontextmanager
    async def lifespan(app):
        yield
        database.dispose()

    app = FastAPI(title = "Exam Roster API", lifespan = lifespan)
    app.state.settings = settings
    app.state.database = database
    app.state.persistence = SqlAlchemyPersistence(database)
    app.state.store = RosterStore(app.state.persistence, settings.dataset_prefix)

    @app.exception_handler(RosterError)
    def roster_error_handler(request: Request, exc: RosterError):
        if exc.status_code >= 500:
            logger.error("%s on %s %s: %s", exc.kind, request.method, request.url.path, exc.message)
        else:
            logger.info("%s on %s %s: %s", exc.kind, request.method, request.url.path, exc.message)
        return JSONResponse(status_code = exc.status_code, content = exc.to_dict())

    @app.get("/")
    def root():
        return {"message": "Exam Roster API is running !"}

    @app.post("/rooms")
    def create_room(req: RoomCreate, request: Request):
        persistence = request.app.state.persistence
        layout = None
        if req.layout:
            layout = {str(k): int(v) for k, v in req.layout.items()}
            capacity = capacity_from_layout(layout, req.seats_per_bench)
        elif req.capacity is not None:
            capacity = req.capacity
        else:
            raise ValidationFailure("Either capacity or layout is required", room_id=req.room_id)

        room = persistence.add_room(
            req.room_id,
            capacity,
            seats_per_bench = req.seats_per_bench if layout else None,
            layout = layout,
        )
        return {"message": "Room created", "room_id": room.room_id, "capacity": room.capacity}

    @app.get("/rooms")
    def list_rooms(request: Request):
        rooms = request.app.state.persistence.list_rooms()
        return [{"room_id": r.room_id, "capacity": r.capacity} for r in rooms]

    @app.get("/rooms/{room_id}/benches")
    def get_benches(room_id: str, request: Request):
        room = request.app.state.persistence.get_room(room_id)
        if room is None:
            return JSONResponse(status_code = 404, content = {"error": "Room not found", "room_id": room_id})
        labels = bench_labels(room["layout"]) if room["layout"] else []
        return {
            "room_id": room_id,
            "seats_per_bench": room["seats_per_bench"],
            "total_benches": len(labels),
            "benches": labels,
        }

    @app.delete("/rooms/{room_id}")
    def delete_room(room_id: str, request: Request):
        deleted = request.app.state.persistence.delete_room(room_id)
        if not deleted:
            return JSONResponse(status_code = 404, content = {"error": "Room not found", "room_id": room_id})
        return {"message": f"Room {room_id} deleted"}

    @app.post("/upload")
    def upload(
        file: UploadFile = File(...),
        subject: str = Form(""),
        store: RosterStore = Depends(get_store),
        settings: Settings = Depends(get_settings),
    ):
        if not subject.strip():
            raise ValidationFailure("Subject is required.")
        content = file.file.read()
        students = load_students(content, file.filename, settings.max_upload_bytes)
        records = store.allocate_subject(subject, students)
        return [r.to_row() for r in records]

    @app.get("/results")
    def results(store: RosterStore = Depends(get_store)):
        return aggregate_rows(store.snapshot())

    @app.get("/class/{subject}/{room_id}")
    def class_roll_numbers(subject: str, room_id: str, store: RosterStore = Depends(get_store)):
        return {"rollNumbers": store.fetch(subject, room_id)}

    @app.post("/class/{subject}/update")
    def update_roll_numbers(subject: str, req: UpdateRequest, store: RosterStore = Depends(get_store)):
        occupants = store.replace_occupants(subject, req.uniqueID, req.rollNumbers)
        return {"success": True, "message": "Roll numbers updated successfully!", "rollNumbers": occupants}

    @app.post("/class/{subject}/add")
    def add_roll_number(subject: str, req: OccupantRequest, store: RosterStore = Depends(get_store)):
        occupants = store.add_occupant(subject, req.uniqueID, req.rollNumber)
        return {"success": True, "message": "Roll number added successfully!", "rollNumbers": occupants}

    @app.post("/class/{subject}/delete")
    def delete_roll_number(subject: str, req: OccupantRequest, store: RosterStore = Depends(get_store)):
        if not req.rollNumber.strip() or not req.uniqueID.strip():
            raise ValidationFailure("Missing required parameters")
        occupants = store.remove_occupant(subject, req.uniqueID, req.rollNumber)
        return {"success": True, "message": "Roll number removed successfully!", "rollNumbers": occupants}

    @app.post("/drop-table")
    def drop_table(req: DropRequest, store: RosterStore = Depends(get_store)):
        name = store.drop(req.subject)
        return {"message": f"Table {name} dropped successfully.", "dataset": name}

    @app.get("/export/{subject}/{fmt}")
    def export_dataset(
        subject: str,
        fmt: str,
        store: RosterStore = Depends(get_store),
        settings: Settings = Depends(get_settings),
    ):
        records = store.fetch_dataset(subject)
        if not records:
            raise DatasetNotFound("No allocation found. Run /upload first.", subject=subject)
        name = store.canonical_name(subject)

        if fmt == "csv":
            file_path = export_csv(records, settings.export_dir, name)
            media_type = "text/csv"
        elif fmt == "excel":
            file_path = export_excel(records, settings.export_dir, name)
            media_type = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        elif fmt == "pdf":
            file_path = export_pdf(records, settings.export_dir, name, f"Seating Arrangement - {subject}")
            media_type = "application/pdf"
        else:
            raise ValidationFailure("Unsupported export format", format=fmt)

        return FileResponse(path = str(file_path), filename = file_path.name, media_type = media_type)

    return app
