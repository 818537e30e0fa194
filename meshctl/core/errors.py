"""Typed error taxonomy shared by services and the HTTP layer."""


class MeshError(Exception):
    """Base error: carries a classification (kind), an HTTP status and a human-readable message."""

    kind = "internal"
    status_code = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict[str, str | int]:
        return {"code": self.status_code, "kind": self.kind, "message": self.message}


class BadRequestError(MeshError):
    """Malformed input, missing required field, or unresolvable reference supplied by the caller."""

    kind = "bad-request"
    status_code = 400


class UnauthorizedError(MeshError):
    """Credential mismatch."""

    kind = "unauthorized"
    status_code = 401


class ForbiddenError(MeshError):
    """Role or permission violation."""

    kind = "forbidden"
    status_code = 403


class NotFoundError(MeshError):
    """Referenced entity is absent."""

    kind = "not-found"
    status_code = 404


class InternalError(MeshError):
    """Store or dependency failure."""

    kind = "internal"
    status_code = 500
