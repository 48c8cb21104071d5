class RosterError(Exception):
    status_code = 500
    kind = "RosterError"

    def __init__(self, message, **context):
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self):
        return {"error": self.kind, "message": self.message, **self.context}


class ValidationFailure(RosterError):
    status_code = 400
    kind = "ValidationFailure"


class NoRoomsAvailable(RosterError):
    status_code = 409
    kind = "NoRoomsAvailable"


class DatasetNotFound(RosterError):
    status_code = 404
    kind = "DatasetNotFound"


class RecordNotFound(RosterError):
    status_code = 404
    kind = "RecordNotFound"


class OccupantNotFound(RosterError):
    status_code = 404
    kind = "OccupantNotFound"


class PersistenceFailure(RosterError):
    status_code = 500
    kind = "PersistenceFailure"
