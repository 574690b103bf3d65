class MediBookError(Exception):
    """Base class for errors surfaced to users as a notice."""

    user_message = "Something went wrong. Please try again."


class NotFoundError(MediBookError):
    user_message = "The requested record could not be found."


class ValidationError(MediBookError):
    user_message = "Please check the form and try again."


class StorageError(MediBookError):
    """A read or write against the data store failed."""


class SlotUnavailableError(MediBookError):
    user_message = "That time slot has just been booked. Please choose another one."


class InsufficientStockError(MediBookError):
    user_message = "Not enough stock available."
