"""
FDA Chat - FastAPI application answering drug questions from openFDA label data.
Translates questions into openFDA queries, streams summarized answers and persists conversations.
"""
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from config import Config
from routes import chat, chats
from auth import AuthMiddleware
from utils.errors import FDAChatError
from utils.http_client import HTTPClientManager
from utils.kv_client import KVClientManager
from utils.logger import app_logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown events."""
    yield
    await HTTPClientManager.close_all()
    await KVClientManager.close_all()

app = FastAPI(title=Config.APP_TITLE, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def describe_validation_error(error: dict) -> str:
    """
    One readable line for a request validation error.

    Args:
        error: Entry from RequestValidationError.errors()

    Returns:
        Message such as "messages.0.role: Input should be 'system', 'user' or 'assistant'"
    """
    loc = [str(part) for part in error.get('loc', []) if part != 'body']
    field = ".".join(loc) or 'body'

    if error.get('type') == 'string_too_long':
        max_length = error.get('ctx', {}).get('max_length', 'unknown')
        return f"Field '{field}' exceeds maximum length of {max_length} characters (current: {len(error.get('input', ''))})"
    return f"{field}: {error.get('msg', 'Validation error')}"


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Reject malformed chat requests with readable messages."""
    errors = exc.errors()
    app_logger.error(f"Validation error for {request.url.path}: {errors}")

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "detail": [
                {
                    "msg": describe_validation_error(error),
                    "type": error.get('type', ''),
                    "loc": list(error.get('loc', []))
                }
                for error in errors
            ]
        },
    )


@app.exception_handler(FDAChatError)
async def chat_error_handler(request: Request, exc: FDAChatError):
    """Translation, openFDA and storage failures all surface as a generic server error."""
    app_logger.error(f"{type(exc).__name__} for {request.url.path}: {exc}")
    return PlainTextResponse("Internal Server Error", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    """Model and network failures propagate here."""
    app_logger.error(f"Unhandled error for {request.url.path}: {exc!r}")
    return PlainTextResponse("Internal Server Error", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


app.add_middleware(AuthMiddleware)

#root endpoint
@app.get("/")
async def root():
    """Root endpoint - health check."""
    return {"message": "FDA Chat Server is running"}

app.include_router(chat.router, tags=["chat"])
app.include_router(chats.router, tags=["chats"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
