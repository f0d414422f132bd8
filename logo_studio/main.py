import logging
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Request, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from .config import (
    API_PREFIX,
    RECENT_PROJECTS_LIMIT,
    STATIC_DIR,
    configure_logging,
    create_openai_client,
    create_supabase_client,
)
from .errors import MissingBrandAnalysisError, ProjectNotFoundError
from .schemas import (
    AnalyzeRequest,
    AnalyzeResponse,
    ConceptResponse,
    ConceptsResponse,
    FavoriteRequest,
    GenerateRequest,
    LogoThumbnail,
    ProjectListResponse,
    ProjectResponse,
    ProjectSummary,
    RegenerateRequest,
)
from .services.logo_generator import LogoGenerator
from .services.projects import ProjectPipeline
from .services.store import SupabaseStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix=API_PREFIX)


def _error(status_code: int, error: str, details: Optional[str] = None) -> JSONResponse:
    content = {"error": error}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def _validation_message(exc: RequestValidationError) -> str:
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        if loc and loc[0] == "transcript":
            if len(loc) > 2 and loc[-1] in ("text", "speaker"):
                return "Each transcript entry must have 'text' and 'speaker' fields."
            return "Invalid transcript format. Expected a non-empty array of transcript entries."
        if loc and loc[0] in ("logoType", "logo_type"):
            return "Invalid logoType. Must be: wordmark, pictorial, or abstract"
        if loc:
            return f"Invalid or missing field: {'.'.join(loc)}"
    return "Invalid request body"


# -------------------
# Dependencies
# -------------------
# Clients are built on first use and cached on app.state, so a test (or another
# entry point) can hand create_app() its own store and generator instead.


def get_store(request: Request) -> SupabaseStore:
    state = request.app.state
    if state.store is None:
        state.store = SupabaseStore(create_supabase_client())
    return state.store


def get_generator(request: Request) -> LogoGenerator:
    state = request.app.state
    if state.generator is None:
        state.generator = LogoGenerator.from_openai(create_openai_client())
    return state.generator


def get_pipeline(
    store: SupabaseStore = Depends(get_store),
    generator: LogoGenerator = Depends(get_generator),
) -> ProjectPipeline:
    return ProjectPipeline(store, generator)


# -------------------
# Routes
# -------------------


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze_transcript(payload: AnalyzeRequest, pipeline: ProjectPipeline = Depends(get_pipeline)):
    try:
        project, brand_analysis, logos = await pipeline.analyze(payload.transcript)
    except Exception as exc:
        logger.error("Analysis error: %s", exc)
        return _error(500, "Failed to analyze transcript", str(exc))

    return AnalyzeResponse(project_id=project.id, brand_analysis=brand_analysis, logos=logos)


@router.post("/generate", response_model=ConceptResponse)
async def generate_logo(payload: GenerateRequest, pipeline: ProjectPipeline = Depends(get_pipeline)):
    """Generate one logo type; the result replaces the project's stored concept of that type."""
    try:
        concept = await pipeline.generate(payload.project_id, payload.logo_type, payload.variant)
    except ProjectNotFoundError:
        return _error(404, "Project not found")
    except MissingBrandAnalysisError as exc:
        return _error(400, str(exc))
    except Exception as exc:
        logger.error("Generation error: %s", exc)
        return _error(500, "Failed to generate logo", str(exc))

    return ConceptResponse(concept=concept)


@router.post("/regenerate", response_model=ConceptResponse | ConceptsResponse)
async def regenerate_logo(payload: RegenerateRequest, pipeline: ProjectPipeline = Depends(get_pipeline)):
    if not payload.regenerate_all and payload.logo_type is None:
        return _error(400, "Missing logoType for single regeneration")

    try:
        if payload.regenerate_all:
            concepts = await pipeline.regenerate_all(payload.project_id)
            return ConceptsResponse(concepts=concepts)
        concept = await pipeline.regenerate(payload.project_id, payload.logo_type)
        return ConceptResponse(concept=concept)
    except ProjectNotFoundError:
        return _error(404, "Project not found")
    except MissingBrandAnalysisError as exc:
        return _error(400, str(exc))
    except Exception as exc:
        logger.error("Regeneration error: %s", exc)
        return _error(500, "Failed to regenerate logo", str(exc))


@router.get("/project/{project_id}", response_model=ProjectResponse)
async def get_project(project_id: str, store: SupabaseStore = Depends(get_store)):
    try:
        project = await run_in_threadpool(store.get_project_with_logos, project_id)
    except Exception as exc:
        logger.error("Failed to get project: %s", exc)
        return _error(500, "Failed to get project", str(exc))

    if project is None:
        return _error(404, "Project not found")
    return ProjectResponse(project=project)


@router.get("/projects", response_model=ProjectListResponse)
async def list_projects(request: Request, store: SupabaseStore = Depends(get_store)):
    try:
        projects = await run_in_threadpool(store.list_recent_projects, request.app.state.recent_limit)
    except Exception as exc:
        logger.error("Failed to get projects: %s", exc)
        return _error(500, "Failed to get projects", str(exc))

    return ProjectListResponse(
        projects=[
            ProjectSummary(
                id=project.id,
                created_at=project.created_at,
                company_name=project.brand_analysis.company_name if project.brand_analysis else "Untitled Project",
                status=project.status,
                logo_count=len(project.logo_concepts),
                logos=[
                    LogoThumbnail(id=logo.id, logo_type=logo.logo_type, svg_code=logo.svg_code)
                    for logo in project.logo_concepts[:3]
                ],
            )
            for project in projects
        ]
    )


@router.patch("/logos/{concept_id}", response_model=ConceptResponse)
async def set_favorite(concept_id: str, payload: FavoriteRequest, store: SupabaseStore = Depends(get_store)):
    try:
        concept = await run_in_threadpool(store.set_logo_concept_favorite, concept_id, payload.is_favorite)
    except Exception as exc:
        logger.error("Failed to update favorite: %s", exc)
        return _error(500, "Failed to update favorite", str(exc))

    if concept is None:
        return _error(404, "Logo concept not found")
    return ConceptResponse(concept=concept)


@router.delete("/logos/{concept_id}", status_code=204)
async def delete_logo(concept_id: str, store: SupabaseStore = Depends(get_store)):
    try:
        deleted = await run_in_threadpool(store.delete_logo_concept, concept_id)
    except Exception as exc:
        logger.error("Failed to delete logo concept: %s", exc)
        return _error(500, "Failed to delete logo concept", str(exc))

    if not deleted:
        return _error(404, "Logo concept not found")
    return Response(status_code=204)


def create_app(
    store: SupabaseStore | None = None,
    generator: LogoGenerator | None = None,
    recent_limit: int = RECENT_PROJECTS_LIMIT,
    serve_ui: bool = True,
) -> FastAPI:
    app = FastAPI(title="Logo Studio API", version="1.0.0")
    app.state.store = store
    app.state.generator = generator
    app.state.recent_limit = recent_limit

    # Basic CORS so a separately hosted front end can call the API.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
        return _error(400, _validation_message(exc), str(exc.errors()))

    @app.get("/health")
    async def health() -> dict[str, bool]:
        return {"ok": True}

    app.include_router(router)

    # Mounted last so the API routes above take precedence over "/".
    if serve_ui and STATIC_DIR.is_dir():
        app.mount("/", StaticFiles(directory=STATIC_DIR, html=True), name="ui")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    configure_logging()
    uvicorn.run("logo_studio.main:app", host="0.0.0.0", port=8000, reload=True)
