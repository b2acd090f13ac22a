import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger("pagewatch.errors")


class AppError(Exception):
    status_code = 500
    message = "Internal server error"

    def __init__(self, message: str | None = None):
        if message:
            self.message = message
        super().__init__(self.message)


class Unauthenticated(AppError):
    status_code = 401
    message = "No token provided"


class InvalidSession(AppError):
    status_code = 403
    message = "Invalid or expired token"


class InvalidToken(AppError):
    status_code = 403
    message = "Invalid or expired token"


class InvalidCredentials(AppError):
    status_code = 401
    message = "Invalid credentials"


class DuplicateEmail(AppError):
    status_code = 400
    message = "Email already exists"


class NotFoundError(AppError):
    status_code = 404
    message = "Not found"


class NavigationError(AppError):
    status_code = 502
    message = "Could not load website"


class SelectorNotFound(AppError):
    status_code = 422
    message = "Selector not found on page"


class ProbeTimeout(AppError):
    status_code = 504
    message = "Probe timed out"


class ProbeBusy(AppError):
    status_code = 503
    message = "Too many probes in progress"


class ProbeCancelled(AppError):
    status_code = 499
    message = "Client closed request"


def _field_errors(exc: RequestValidationError) -> list[dict]:
    out = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "path", "query")]
        out.append({"field": ".".join(loc), "message": err.get("msg", "")})
    return out


def register_exception_handlers(app: FastAPI):
    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError):
        return JSONResponse({"error": exc.message}, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse({"error": _field_errors(exc)}, status_code=400)

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.exception("%s %s failed", request.method, request.url.path)
        return JSONResponse({"error": "Internal server error"}, status_code=500)
