import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from supabase import Client, PostgrestAPIError

from ..errors import StoreError
from ..schemas import (
    BrandAnalysis,
    GeneratedLogo,
    LogoConcept,
    LogoType,
    Project,
    ProjectStatus,
    TranscriptEntry,
)

logger = logging.getLogger(__name__)

PROJECTS_TABLE = "projects"
LOGO_CONCEPTS_TABLE = "logo_concepts"

# Postgres rejects malformed uuid literals with this code; treat those ids as absent.
INVALID_TEXT_REPRESENTATION = "22P02"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _project_from_row(row: Dict[str, Any], logos: Optional[List[Dict[str, Any]]] = None) -> Project:
    return Project(
        id=str(row["id"]),
        created_at=row.get("created_at"),
        transcript=row.get("transcript") or [],
        brand_analysis=row.get("brand_analysis"),
        status=row.get("status") or ProjectStatus.PENDING,
        error_message=row.get("error_message"),
        logo_concepts=[_concept_from_row(logo) for logo in logos or []],
    )


def _concept_from_row(row: Dict[str, Any]) -> LogoConcept:
    return LogoConcept(
        id=str(row["id"]),
        project_id=str(row["project_id"]),
        created_at=row.get("created_at"),
        concept_name=row["concept_name"],
        logo_type=row["logo_type"],
        rationale=row["rationale"],
        svg_code=row["svg_code"],
        is_favorite=bool(row.get("is_favorite")),
    )


class SupabaseStore:
    """Typed CRUD over the ``projects`` and ``logo_concepts`` tables."""

    def __init__(self, client: Client):
        self.client = client

    def _execute(self, query, action: str):
        try:
            return query.execute()
        except PostgrestAPIError as exc:
            raise StoreError(f"Failed to {action}: {exc.message}") from exc

    def _lookup(self, query, action: str) -> List[Dict[str, Any]]:
        """Like ``_execute`` but a malformed id reads as "no rows"."""
        try:
            return query.execute().data or []
        except PostgrestAPIError as exc:
            if exc.code == INVALID_TEXT_REPRESENTATION:
                return []
            raise StoreError(f"Failed to {action}: {exc.message}") from exc

    # -------------------
    # Projects
    # -------------------

    def create_project(self, transcript: List[TranscriptEntry]) -> Project:
        response = self._execute(
            self.client.table(PROJECTS_TABLE).insert(
                {
                    "transcript": [entry.model_dump(exclude_none=True) for entry in transcript],
                    "status": ProjectStatus.PENDING.value,
                }
            ),
            "create project",
        )
        project = _project_from_row(response.data[0])
        logger.info("Created project %s", project.id)
        return project

    def _update_project(self, project_id: str, values: Dict[str, Any], action: str) -> None:
        self._execute(
            self.client.table(PROJECTS_TABLE).update(values).eq("id", project_id),
            action,
        )

    def update_project_status(self, project_id: str, status: ProjectStatus) -> None:
        self._update_project(project_id, {"status": status.value}, "update project status")

    def update_project_analysis(self, project_id: str, brand_analysis: BrandAnalysis) -> None:
        self._update_project(
            project_id,
            {
                "brand_analysis": brand_analysis.model_dump(by_alias=True, mode="json"),
                "status": ProjectStatus.GENERATING.value,
            },
            "update project analysis",
        )

    def complete_project(self, project_id: str) -> None:
        self._update_project(
            project_id,
            {"status": ProjectStatus.COMPLETE.value, "error_message": None},
            "complete project",
        )

    def fail_project(self, project_id: str, message: str) -> None:
        self._update_project(
            project_id,
            {"status": ProjectStatus.ERROR.value, "error_message": message},
            "record project failure",
        )

    def get_project(self, project_id: str) -> Optional[Project]:
        rows = self._lookup(
            self.client.table(PROJECTS_TABLE).select("*").eq("id", project_id).limit(1),
            "get project",
        )
        return _project_from_row(rows[0]) if rows else None

    def _logos_for(self, project_ids: List[str]) -> List[Dict[str, Any]]:
        if not project_ids:
            return []
        response = self._execute(
            self.client.table(LOGO_CONCEPTS_TABLE)
            .select("*")
            .in_("project_id", project_ids)
            .order("created_at"),
            "get logos",
        )
        return response.data or []

    def get_project_with_logos(self, project_id: str) -> Optional[Project]:
        rows = self._lookup(
            self.client.table(PROJECTS_TABLE).select("*").eq("id", project_id).limit(1),
            "get project",
        )
        if not rows:
            return None
        return _project_from_row(rows[0], self._logos_for([project_id]))

    def list_recent_projects(self, limit: int = 20) -> List[Project]:
        response = self._execute(
            self.client.table(PROJECTS_TABLE).select("*").order("created_at", desc=True).limit(limit),
            "get projects",
        )
        rows = response.data or []

        by_project: Dict[str, List[Dict[str, Any]]] = {str(row["id"]): [] for row in rows}
        for logo in self._logos_for(list(by_project)):
            by_project.setdefault(str(logo["project_id"]), []).append(logo)

        return [_project_from_row(row, by_project[str(row["id"])]) for row in rows]

    # -------------------
    # Logo concepts
    # -------------------

    def save_logo_concept(self, project_id: str, logo: GeneratedLogo) -> LogoConcept:
        """Insert a concept, replacing any existing concept of the same type."""
        response = self._execute(
            self.client.table(LOGO_CONCEPTS_TABLE).upsert(
                {
                    "project_id": project_id,
                    "logo_type": logo.logo_type.value,
                    "concept_name": logo.concept_name,
                    "rationale": logo.rationale,
                    "svg_code": logo.svg_code,
                    "is_favorite": False,
                    "created_at": _now(),
                },
                on_conflict="project_id,logo_type",
            ),
            "create logo concept",
        )
        return _concept_from_row(response.data[0])

    def delete_logo_concepts_by_type(self, project_id: str, logo_type: LogoType) -> None:
        self._execute(
            self.client.table(LOGO_CONCEPTS_TABLE)
            .delete()
            .eq("project_id", project_id)
            .eq("logo_type", logo_type.value),
            "delete logo concepts",
        )

    def delete_logo_concept(self, concept_id: str) -> bool:
        rows = self._lookup(
            self.client.table(LOGO_CONCEPTS_TABLE).delete().eq("id", concept_id),
            "delete logo concept",
        )
        return bool(rows)

    def set_logo_concept_favorite(self, concept_id: str, is_favorite: bool) -> Optional[LogoConcept]:
        rows = self._lookup(
            self.client.table(LOGO_CONCEPTS_TABLE).update({"is_favorite": is_favorite}).eq("id", concept_id),
            "update favorite",
        )
        return _concept_from_row(rows[0]) if rows else None
