# apps/core/exceptions.py


class LifeTrackerError(Exception):
    """Base class for every error raised by the tracker core."""


class ValidationError(LifeTrackerError, ValueError):
    """Input rejected before anything was written."""


class InvalidTransition(ValidationError):
    """Manual status change that the goal lifecycle does not allow."""


class NotFoundError(LifeTrackerError, LookupError):
    def __init__(self, collection: str, key: str):
        self.collection = collection
        self.key = key
        super().__init__(f"{collection}/{key} not found")


class PersistenceFailure(LifeTrackerError):
    """The document gateway call failed (network, auth, quota, database)."""
