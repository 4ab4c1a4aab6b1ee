from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from research_agent.api.routes import research
from research_agent.config import get_settings
from research_agent.models.schemas import HealthResponse, describe_validation_error
from research_agent.services import logger as log_service

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    log_service.log_event(
        event_type="startup",
        message=f"{settings.agent_name} {settings.agent_version} starting",
        search_enabled=bool(settings.brave_api_key),
        synthesis_enabled=bool(settings.openrouter_api_key),
    )
    yield


app = FastAPI(
    title=settings.agent_name,
    description="Research synthesis with Ted's analytical edge. Skeptical of hype, focused on signal.",
    version=settings.agent_version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(research.router)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": describe_validation_error(exc.errors())},
    )


@app.get("/api/health", response_model=HealthResponse)
async def health():
    return HealthResponse(
        status="ok",
        service=settings.agent_name,
        version=settings.agent_version,
        search_enabled=bool(settings.brave_api_key),
        synthesis_enabled=bool(settings.openrouter_api_key),
    )
