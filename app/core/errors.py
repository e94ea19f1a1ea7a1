from enum import Enum
from typing import Optional


class UserErrorKind(str, Enum):
    INVALID_INPUT = "invalid_input"
    INVALID_EMAIL = "invalid_email"
    RECORD_NOT_FOUND = "record_not_found"
    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    FETCH_FAILED = "fetch_failed"
    WRITE_FAILED = "write_failed"
    DELETE_FAILED = "delete_failed"
    ENCODE_FAILED = "encode_failed"
    DECODE_FAILED = "decode_failed"


MESSAGES = {
    UserErrorKind.INVALID_INPUT: "invalid user data",
    UserErrorKind.INVALID_EMAIL: "invalid email",
    UserErrorKind.RECORD_NOT_FOUND: "user not found",
    UserErrorKind.NOT_FOUND: "user does not exist",
    UserErrorKind.ALREADY_EXISTS: "user already exists",
    UserErrorKind.FETCH_FAILED: "failed to fetch record",
    UserErrorKind.WRITE_FAILED: "could not put item",
    UserErrorKind.DELETE_FAILED: "could not delete item",
    UserErrorKind.ENCODE_FAILED: "could not marshal item",
    UserErrorKind.DECODE_FAILED: "failed to unmarshal record",
}

# Kinds raised when a conditional write's existence check does not hold
PRECONDITION_KINDS = frozenset({UserErrorKind.ALREADY_EXISTS, UserErrorKind.NOT_FOUND})


class UserError(Exception):
    """A failed user operation.

    Callers branch on ``kind``; ``message`` is the text sent back to clients
    and ``cause`` keeps the backend or parsing exception, if any.
    """

    def __init__(self, kind: UserErrorKind, cause: Optional[BaseException] = None):
        self.kind = kind
        self.message = MESSAGES[kind]
        self.cause = cause
        super().__init__(self.message)

    @property
    def precondition_failed(self) -> bool:
        return self.kind in PRECONDITION_KINDS

    def __repr__(self):
        return f"UserError({self.kind.name}, cause={self.cause!r})"
