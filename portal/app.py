"""Main FastAPI application with modularized routes."""
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from portal.client import BackendError, BackendUnauthorized
from portal.logging_setup import setup_console_logging
from portal.routes import auth, candidate, categories, questions, results, tests

setup_console_logging()
log = logging.getLogger(__name__)

app = FastAPI(title="Interview Portal")

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(BackendError)
async def backend_error_handler(request: Request, exc: BackendError) -> JSONResponse:
    """Report backend failures from admin routes; 401 signs the admin out."""
    if isinstance(exc, BackendUnauthorized):
        return JSONResponse(
            status_code=401,
            content={"detail": exc.message, "redirect": "/login"},
        )
    status_code = exc.status_code if exc.status_code and exc.status_code >= 400 else 502
    return JSONResponse(status_code=status_code, content={"detail": exc.message})


@app.get("/api/health")
def health() -> dict[str, str]:
    """Liveness probe."""
    return {"status": "ok"}


# Include routers
app.include_router(auth.router)
app.include_router(categories.router)
app.include_router(questions.router)
app.include_router(tests.router)
app.include_router(results.router)
app.include_router(candidate.router)
