import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Tuple

from fastapi.concurrency import run_in_threadpool

from ..errors import MissingBrandAnalysisError, ProjectNotFoundError
from ..schemas import (
    LOGO_TYPES,
    BrandAnalysis,
    GeneratedLogo,
    LogoConcept,
    LogoType,
    Project,
    ProjectStatus,
    TranscriptEntry,
)
from .logo_generator import LogoGenerator
from .store import SupabaseStore

logger = logging.getLogger(__name__)


class ProjectPipeline:
    """
    Request-level sequences that move a project through its lifecycle.

    pending -> analyzing -> generating -> complete, with any failure along the
    way recorded as ``error`` (plus its message) before the exception is
    re-raised to the caller.
    """

    def __init__(self, store: SupabaseStore, generator: LogoGenerator):
        self.store = store
        self.generator = generator

    @asynccontextmanager
    async def _recording_failure(self, project_id: str) -> AsyncIterator[None]:
        try:
            yield
        except Exception as exc:
            logger.exception("Project %s failed", project_id)
            try:
                await run_in_threadpool(self.store.fail_project, project_id, str(exc))
            except Exception:
                logger.exception("Could not record failure for project %s", project_id)
            raise

    async def _save_all(self, project_id: str, logos: List[GeneratedLogo]) -> List[LogoConcept]:
        saved = []
        for logo in logos:
            saved.append(await run_in_threadpool(self.store.save_logo_concept, project_id, logo))
        return saved

    async def _load_analysed(self, project_id: str) -> Tuple[Project, BrandAnalysis]:
        project = await run_in_threadpool(self.store.get_project, project_id)
        if project is None:
            raise ProjectNotFoundError(project_id)
        if project.brand_analysis is None:
            raise MissingBrandAnalysisError(project_id)
        return project, project.brand_analysis

    async def analyze(
        self, transcript: List[TranscriptEntry]
    ) -> Tuple[Project, BrandAnalysis, List[GeneratedLogo]]:
        project = await run_in_threadpool(self.store.create_project, transcript)

        async with self._recording_failure(project.id):
            await run_in_threadpool(self.store.update_project_status, project.id, ProjectStatus.ANALYZING)
            brand_analysis = await self.generator.analyze(transcript)

            await run_in_threadpool(self.store.update_project_analysis, project.id, brand_analysis)
            logos = await self.generator.generate_all(brand_analysis)

            await self._save_all(project.id, logos)
            await run_in_threadpool(self.store.complete_project, project.id)

        logger.info("Project %s complete with %d logo(s)", project.id, len(logos))
        return project, brand_analysis, logos

    async def generate(self, project_id: str, logo_type: LogoType, variant: int = 1) -> LogoConcept:
        """
        Generate one concept and store it as the project's concept of that type.

        A project keeps one concept per type, so this replaces any existing one,
        including when variant 2 asks for a different pictorial angle.
        """
        _, brand_analysis = await self._load_analysed(project_id)

        async with self._recording_failure(project_id):
            logo = await self.generator.generate(logo_type, brand_analysis, variant)
            concept = await run_in_threadpool(self.store.save_logo_concept, project_id, logo)
            await run_in_threadpool(self.store.complete_project, project_id)
        return concept

    async def regenerate(self, project_id: str, logo_type: LogoType) -> LogoConcept:
        # The upsert on (project_id, logo_type) replaces the previous concept atomically.
        return await self.generate(project_id, logo_type)

    async def regenerate_all(self, project_id: str) -> List[LogoConcept]:
        _, brand_analysis = await self._load_analysed(project_id)

        async with self._recording_failure(project_id):
            for logo_type in LOGO_TYPES:
                await run_in_threadpool(self.store.delete_logo_concepts_by_type, project_id, logo_type)
            logos = await self.generator.generate_all(brand_analysis)
            concepts = await self._save_all(project_id, logos)
            await run_in_threadpool(self.store.complete_project, project_id)
        return concepts
