class TrainLogError(Exception):
    """ Base class for every error raised by trainlog_core """


class StorageError(TrainLogError):
    """ Reading or writing the log, its folders or its backups failed """

    def __init__(self, operation: str, path, reason: str = ""):
        self.operation = operation
        self.path = path
        msg = f"Could not {operation} {path}"
        super().__init__(f"{msg}: {reason}" if reason else msg)


class InvalidInputError(TrainLogError, ValueError):
    """ User supplied field failed creation-time validation """

    def __init__(self, field: str, expected: str, value=None):
        self.field = field
        self.expected = expected
        self.value = value
        super().__init__(f"Invalid {field} {value!r}: expected {expected}")


class EntryNotFoundError(TrainLogError, LookupError):
    """ No session with the given id exists in the log """

    def __init__(self, entry_id: str):
        self.entry_id = entry_id
        super().__init__(f"No session with id {entry_id!r}")
