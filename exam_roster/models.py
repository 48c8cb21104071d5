from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple


@dataclass(frozen=True)
class Room:
    room_id: str
    capacity: int


@dataclass
class StudentRecord:
    roll_no: str
    # every other column of the uploaded row, untouched
    fields: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class AssignmentRecord:
    room_id: str
    occupants: Tuple[str, ...]
    occupant_count: int
    subject: str
    capacity: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, "occupants", tuple(self.occupants))
        if self.occupant_count != len(self.occupants):
            raise ValueError(
                f"occupant_count {self.occupant_count} does not match "
                f"{len(self.occupants)} occupants for room {self.room_id}"
            )

    @classmethod
    def build(cls, room_id, occupants, subject, capacity=None):
        occupants = tuple(occupants)
        return cls(room_id, occupants, len(occupants), subject, capacity)

    def to_row(self):
        """Result-table shape: the column names the roster UI and CSV exports use."""
        return {
            "UniqueID": self.room_id,
            "RollNumbers": ", ".join(self.occupants),
            "QuestionPaperCount": self.occupant_count,
            "Subject": self.subject,
        }
