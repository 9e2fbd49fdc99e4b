# main.py
import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.exceptions import AuthorizationError, QuizAppError
from app.routes.attempt import router as attempt_router
from app.routes.quiz import router as quiz_router

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

ERROR_STATUS = {
    "validation": status.HTTP_400_BAD_REQUEST,
    "not_found": status.HTTP_404_NOT_FOUND,
    "authorization": status.HTTP_403_FORBIDDEN,
    "conflict": status.HTTP_409_CONFLICT,
    "storage": status.HTTP_500_INTERNAL_SERVER_ERROR,
}

app = FastAPI(title=settings.PROJECT_NAME)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(QuizAppError)
async def quiz_app_error_handler(request: Request, exc: QuizAppError):
    status_code = ERROR_STATUS.get(exc.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)
    if isinstance(exc, AuthorizationError) and not exc.authenticated:
        status_code = status.HTTP_401_UNAUTHORIZED
    if status_code >= 500:
        logger.error(f"❌ {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": exc.to_dict()},
    )


@app.get("/")
def read_root():
    return {"message": f"{settings.PROJECT_NAME} is running"}


app.include_router(quiz_router)
app.include_router(attempt_router)
