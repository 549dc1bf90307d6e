import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from academy.core.config import LOG_LEVEL
from academy.core.errors import InternalError
from academy.core.logging_middleware import LoggingMiddleware
from academy.db.init_db import init_db
from academy.routers.admin import router as admin_router
from academy.routers.admin_classes import router as admin_classes_router
from academy.routers.admin_users import router as admin_users_router
from academy.routers.auth import router as auth_router
from academy.routers.classes import router as classes_router
from academy.routers.programs import admin_router as admin_programs_router
from academy.routers.programs import router as programs_router
from academy.routers.student import router as student_router
from academy.routers.students import router as students_router
from academy.routers.teacher import router as teacher_router

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title="Academy Portal")

# Middleware
app.add_middleware(LoggingMiddleware)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    # no detail leaves the server; the traceback goes to the log
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=InternalError.status_code,
        content={"detail": InternalError.default_detail},
    )


# Health check
@app.get("/health")
def health():
    return {"status": "ok"}


# Startup event
@app.on_event("startup")
def on_startup():
    init_db()


# Include routers
app.include_router(auth_router, prefix="/auth", tags=["auth"])
app.include_router(admin_users_router, prefix="/admin/users", tags=["admin"])
app.include_router(admin_classes_router, prefix="/admin/classes", tags=["admin"])
app.include_router(admin_programs_router, prefix="/admin/programs", tags=["admin"])
app.include_router(admin_router, prefix="/admin", tags=["admin"])
app.include_router(programs_router, prefix="/programs", tags=["programs"])
app.include_router(classes_router, prefix="/classes", tags=["classes"])
app.include_router(students_router, prefix="/students", tags=["students"])

# Dashboards (no prefix — routes already define full paths)
app.include_router(teacher_router)
app.include_router(student_router)
