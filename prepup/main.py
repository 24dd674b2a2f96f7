"""
FastAPI application entry point
"""
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from prepup.app.api.v1.files import routes as files
from prepup.app.api.v1.questions import routes as questions
from prepup.app.api.v1.resumes import routes as resumes
from prepup.app.api.v1.user import sync_router
from prepup.app.api.v1.voice import routes as voice
from prepup.app.core.config import settings
from prepup.app.core.exceptions import AppError
from prepup.app.core.logging_config import get_logger, setup_logging
from prepup.app.db.base import Base
from prepup.app.db.session import engine

# Import models so they register with Base.metadata
import prepup.app.models  # noqa: F401

setup_logging()
logger = get_logger("main")

# GraphQL mode never touches the local database
if settings.metadata_backend == "orm":
    Base.metadata.create_all(bind=engine)

# Initialize FastAPI app
app = FastAPI(
    title="PrepUp API",
    description="Resume storage, versioning and mock interview sessions",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("Request failed path=%s status=%d detail=%s", request.url.path, exc.status_code, exc.detail)
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid request", "errors": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error path=%s", request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# Include routers
app.include_router(resumes.router, prefix="/api/resumes", tags=["resumes"])
app.include_router(files.router, prefix="/api/files", tags=["files"])
app.include_router(sync_router, prefix="/api/user", tags=["user"])
app.include_router(questions.router, prefix="/api/questions", tags=["questions"])
app.include_router(voice.router, prefix="/api/voice", tags=["voice"])


@app.get("/")
def read_root():
    """Root endpoint"""
    return {"message": "PrepUp API", "version": settings.app_version}


@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "metadataBackend": settings.metadata_backend}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
