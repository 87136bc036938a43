"""
Domain errors and their HTTP translation.

Services raise APIError subclasses; the handlers registered here turn them
into the JSON bodies clients expect. Anything else is logged and answered
with a bare 500 so no internals reach the caller.
"""

from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse

from log_config import get_logger

logger = get_logger("errors")

# Client-facing messages for request fields, keyed by field name.
FIELD_MESSAGES = {
    "name": "Name is required",
    "email": "Please use a valid email",
    "password": "Please enter a password with 6 or more characters",
    "status": "Status is required",
    "skills": "Skills is required",
    "title": "Title is required",
    "company": "Company is required",
    "from": "From date is required",
}

# Overrides for routes whose rules differ from the defaults above.
ROUTE_FIELD_MESSAGES = {
    "/api/auth": {"password": "Password is required"},
}


class APIError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, msg: str):
        super().__init__(msg)
        self.msg = msg

    def payload(self) -> Dict[str, Any]:
        return {"msg": self.msg}


class ValidationError(APIError):
    """One or more request fields failed validation."""

    def __init__(self, errors: List[Dict[str, Any]]):
        super().__init__("; ".join(error["msg"] for error in errors))
        self.errors = errors

    @classmethod
    def for_fields(cls, *params: str) -> "ValidationError":
        return cls([field_error(param) for param in params])

    def payload(self) -> Dict[str, Any]:
        return {"errors": self.errors}


class DuplicateUserError(APIError):
    def __init__(self, msg: str = "User already exists in system"):
        super().__init__(msg)

    def payload(self) -> Dict[str, Any]:
        return {"errors": [{"msg": self.msg}]}


class InvalidCredentialsError(APIError):
    def __init__(self, msg: str = "Invalid Credentials"):
        super().__init__(msg)

    def payload(self) -> Dict[str, Any]:
        return {"errors": [{"msg": self.msg}]}


class NotFoundError(APIError):
    def __init__(self, msg: str = "There is no profile for this user"):
        super().__init__(msg)


class AuthenticationError(APIError):
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, msg: str = "Token is not valid"):
        super().__init__(msg)


def field_error(param: str, value: Any = None, msg: Optional[str] = None, location: str = "body") -> Dict[str, Any]:
    error = {"msg": msg or FIELD_MESSAGES.get(param, "Invalid value"), "param": param, "location": location}
    if value is not None:
        error["value"] = value
    return error


def _request_validation_errors(exc: RequestValidationError, path: str = "") -> List[Dict[str, Any]]:
    messages = {**FIELD_MESSAGES, **ROUTE_FIELD_MESSAGES.get(path.rstrip("/"), {})}
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ())]
        location = loc[0] if loc else "body"
        param = loc[-1] if len(loc) > 1 else location
        value = err.get("input") if len(loc) > 1 else None
        if param == "password" or not isinstance(value, (str, int, float, bool)):
            value = None
        errors.append(field_error(param, value=value, msg=messages.get(param, err.get("msg")), location=location))
    return errors


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError):
        logger.warning(
            "api_error",
            error_type=type(exc).__name__,
            detail=exc.msg,
            status_code=exc.status_code,
            path=request.url.path,
        )
        return JSONResponse(status_code=exc.status_code, content=exc.payload())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = _request_validation_errors(exc, request.url.path)
        logger.warning("validation_error", params=[error["param"] for error in errors], path=request.url.path)
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"errors": errors})

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(
            "unhandled_exception",
            error=str(exc),
            error_type=type(exc).__name__,
            path=request.url.path,
        )
        return PlainTextResponse("Server Error", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
