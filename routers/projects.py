# routers/projects.py

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from core.errors import handle_supabase_error
from core.permission_helpers import filter_projects_for_actor, require_project_access
from core.supabase_client import get_supabase_client
from dependencies.auth import get_current_actor
from models.project import ProjectRead


router = APIRouter(
    prefix="/projects",
    tags=["Projects"],
)


def _require_actor(actor):
    if actor is None:
        raise HTTPException(403, "Admin account not found")
    return actor


# -----------------------------------------------------
# LIST: only the projects this actor is scoped to
# -----------------------------------------------------
@router.get("/", response_model=List[ProjectRead], summary="Projects visible to the current actor")
def list_projects(actor=Depends(get_current_actor)):
    _require_actor(actor)

    client = get_supabase_client()
    if not client:
        raise HTTPException(500, "Supabase client not configured")

    try:
        result = client.table("projects").select("*").order("name").execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch projects")

    return filter_projects_for_actor(actor, result.data or [])


@router.get("/{project_id}", response_model=ProjectRead, summary="Get one project")
def get_project(project_id: str, actor=Depends(get_current_actor)):
    _require_actor(actor)
    require_project_access(actor, project_id)

    client = get_supabase_client()
    if not client:
        raise HTTPException(500, "Supabase client not configured")

    try:
        result = (
            client.table("projects")
            .select("*")
            .eq("id", project_id)
            .limit(1)
            .execute()
        )
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch project")

    if not result.data:
        raise HTTPException(404, "Project not found")
    return result.data[0]
