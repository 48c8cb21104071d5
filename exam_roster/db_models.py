from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String, Text, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from .database import Base


class RoomDB(Base):
    __tablename__ = "rooms"

    id = Column(Integer, primary_key = True, index = True)
    room_id = Column(String, unique = True, index = True, nullable = False)
    capacity = Column(Integer, nullable = False)

    # set only for rooms declared from a bench layout, e.g. {"1":4,"2":5,"3":3}
    seats_per_bench = Column(Integer, nullable = True)
    layout_json = Column(String, nullable = True)


class DatasetDB(Base):
    __tablename__ = "datasets"

    id = Column(Integer, primary_key = True, index = True)
    name = Column(String, unique = True, index = True, nullable = False)
    subject = Column(String, nullable = False)
    created_at = Column(DateTime, nullable = False, default = datetime.now)

    allocations = relationship(
        "AllocationDB",
        back_populates = "dataset",
        cascade = "all, delete-orphan",
        order_by = "AllocationDB.position",
    )


class AllocationDB(Base):
    __tablename__ = "allocations"
    __table_args__ = (UniqueConstraint("dataset_id", "room_id", name = "uq_allocation_dataset_room"),)

    id = Column(Integer, primary_key = True, index = True)
    dataset_id = Column(Integer, ForeignKey("datasets.id", ondelete = "CASCADE"), nullable = False, index = True)
    position = Column(Integer, nullable = False)

    room_id = Column(String, nullable = False)
    # room capacity as it was when the dataset was created
    capacity = Column(Integer, nullable = False)
    roll_numbers = Column(Text, nullable = False, default = "")
    question_paper_count = Column(Integer, nullable = False, default = 0)
    subject = Column(String, nullable = False)

    dataset = relationship("DatasetDB", back_populates = "allocations")
