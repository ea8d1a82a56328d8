import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from schedule_desk.api.clients import router as clients_router
from schedule_desk.api.schedules import router as schedules_router
from schedule_desk.application.exceptions import ClientNotFoundError
from schedule_desk.core.config import settings

class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in ("appointment_id", "client_id", "operation", "mode", "status_code", "error"):
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)

logger = logging.getLogger(__name__)

app = FastAPI(title="Schedule Desk", version="1.0.0")

app.include_router(clients_router, prefix="/api", tags=["clients"])
app.include_router(schedules_router, prefix="/api", tags=["schedules"])


@app.exception_handler(StarletteHTTPException)
async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    message = "; ".join(
        f"{'.'.join(str(p) for p in e.get('loc', ())[1:]) or 'body'}: {e.get('msg', 'invalid')}"
        for e in errors
    )
    return JSONResponse(status_code=400, content={"error": message or "Invalid request"})


@app.exception_handler(ClientNotFoundError)
async def client_not_found(request: Request, exc: ClientNotFoundError) -> JSONResponse:
    logger.error("Error in %s %s", request.method, request.url.path, extra={"error": str(exc)})
    return JSONResponse(status_code=500, content={"error": str(exc)})


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
