import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .errors import CopilotError, ValidationError
from .settings import settings
from .routers import health, suggest, copilot

logging.basicConfig(
	level=getattr(logging, settings.log_level.upper(), logging.INFO),
	format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def _allowed_origins() -> list[str]:
	origins = settings.cors_origin_list
	if "*" in origins:
		# Credentials may be involved; only explicit origins are ever reflected
		logger.warning("CORS_ORIGINS contains '*'; ignoring wildcard entry")
		origins = [o for o in origins if o != "*"]
	return origins


app = FastAPI(title="Smart Assessment Copilot API")
app.add_middleware(
	CORSMiddleware,
	allow_origins=_allowed_origins(),
	allow_credentials=True,
	allow_methods=["GET", "POST", "OPTIONS"],
	allow_headers=["*"],
)
app.include_router(health.router)
app.include_router(suggest.router)
app.include_router(copilot.router)


def _error_response(exc: CopilotError, headers=None) -> JSONResponse:
	return JSONResponse(status_code=exc.status_code, content={"error": exc.message}, headers=headers)


@app.exception_handler(CopilotError)
async def copilot_error_handler(request: Request, exc: CopilotError):
	return _error_response(exc)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
	if exc.status_code == 405:
		return _error_response(ValidationError("Method not allowed", status_code=405), headers=exc.headers)
	return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
	return _error_response(ValidationError("Invalid payload"))


@app.get("/info")
def root():
	return {"status": "ok", "openai_configured": bool(settings.openai_api_key)}
