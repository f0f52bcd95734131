from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from calog.config import settings
from calog.log import configure_logging
from calog.metabolic.router import router as metrics_router

configure_logging(settings.log_level)

app = FastAPI(title="Calog Metrics", version="0.1.0")
app.include_router(metrics_router)


@app.exception_handler(HTTPException)
async def http_error(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc.detail)},
        headers=exc.headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    first = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "query"))
    message = f"{field}: {first.get('msg', 'invalid value')}" if field else "Invalid request"
    return JSONResponse(status_code=422, content={"success": False, "message": message})


@app.get("/")
async def root() -> dict:
    return {
        "status": "ok",
        "docs": "/docs",
        "health": "/health",
        "metrics": {
            "profile": "/metrics/profile",
            "calorie_goal": "/metrics/calorie-goal",
            "bmi": "/metrics/bmi",
        },
    }


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}
