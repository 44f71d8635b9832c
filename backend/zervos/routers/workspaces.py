"""Workspace API endpoints."""

from fastapi import APIRouter, Depends, HTTPException

from zervos.core.context import BrowsingContext, get_context
from zervos.schemas.workspace import Workspace, WorkspaceSelection
from zervos.services.workspace_service import WorkspaceContext

router = APIRouter()


def get_workspace_context(context: BrowsingContext = Depends(get_context)) -> WorkspaceContext:
    workspaces = WorkspaceContext(context)
    workspaces.initialize()
    return workspaces


@router.get("/", response_model=list[Workspace], summary="List workspaces")
async def list_workspaces(
    workspaces: WorkspaceContext = Depends(get_workspace_context),
) -> list[Workspace]:
    return workspaces.get_all()


@router.put("/", response_model=list[Workspace], summary="Replace all workspaces")
async def replace_workspaces(
    data: list[Workspace],
    workspaces: WorkspaceContext = Depends(get_workspace_context),
) -> list[Workspace]:
    """Replace the collection; the selection is kept only if it still exists."""
    workspaces.set_all(data)
    return workspaces.get_all()


@router.get(
    "/selected",
    response_model=Workspace | None,
    summary="Get the selected workspace",
)
async def get_selected_workspace(
    workspaces: WorkspaceContext = Depends(get_workspace_context),
) -> Workspace | None:
    return workspaces.get_selected()


@router.put(
    "/selected",
    response_model=Workspace | None,
    summary="Select a workspace",
    responses={404: {"description": "Workspace not found"}},
)
async def select_workspace(
    data: WorkspaceSelection,
    workspaces: WorkspaceContext = Depends(get_workspace_context),
) -> Workspace | None:
    if data.workspace_id is None:
        workspaces.set_selected(None)
        return None
    workspace = workspaces.get_by_id(data.workspace_id)
    if workspace is None:
        raise HTTPException(status_code=404, detail="Workspace not found")
    workspaces.set_selected(workspace)
    return workspace
