"""
Project Endpoints.

CRUD for editing projects owned by the signed-in user, plus saving the editor
timeline and registering uploaded media as project assets.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Query, status

from vibe_creator.core.models.io.common import ApiResponse
from vibe_creator.core.models.io.projects import (
    AssetCreate,
    AssetRead,
    ProjectCreate,
    ProjectDetail,
    ProjectListItem,
    ProjectRead,
    ProjectUpdate,
    TimelineUpdate,
)
from vibe_creator.server.core import constant
from vibe_creator.server.services.deps import CurrentUser, ProjectServiceDep

router = APIRouter()

_NOT_FOUND = {404: {"description": "Project not found"}}


@router.get(
    "",
    response_model=ApiResponse[List[ProjectListItem]],
    summary="List Projects",
    description="List the user's projects, most recently updated first, with their asset counts.",
    response_description="A page of projects with pagination metadata.",
)
async def list_projects(
    user: CurrentUser,
    projects: ProjectServiceDep,
    page: int = Query(1, ge=1, description="Page number (1-based)"),
    limit: int = Query(20, ge=1, description="Page size, capped at 100"),
) -> ApiResponse[List[ProjectListItem]]:
    items, meta = await projects.list_projects(user, page, min(limit, constant.MAX_LIMIT))
    return ApiResponse[List[ProjectListItem]](data=items, meta=meta)


@router.get(
    "/{project_id}",
    response_model=ApiResponse[ProjectDetail],
    summary="Get Project",
    description="Return a project with its assets, newest first.",
    response_description="Project details.",
    responses=_NOT_FOUND,
)
async def get_project(project_id: str, user: CurrentUser, projects: ProjectServiceDep) -> ApiResponse[ProjectDetail]:
    return ApiResponse[ProjectDetail](data=await projects.get_detail(user, project_id))


@router.post(
    "",
    response_model=ApiResponse[ProjectRead],
    status_code=status.HTTP_201_CREATED,
    summary="Create Project",
    description="Create a DRAFT project. Omitted settings fall back to 1920x1080 at 30 fps.",
    response_description="The created project.",
)
async def create_project(body: ProjectCreate, user: CurrentUser, projects: ProjectServiceDep) -> ApiResponse[ProjectRead]:
    project = await projects.create_project(user, body)
    return ApiResponse[ProjectRead](data=ProjectRead.model_validate(project))


@router.patch(
    "/{project_id}",
    response_model=ApiResponse[ProjectRead],
    summary="Update Project",
    description="Update title, description, status or settings. Settings are merged into the existing ones.",
    response_description="The updated project.",
    responses=_NOT_FOUND,
)
async def update_project(
    project_id: str, body: ProjectUpdate, user: CurrentUser, projects: ProjectServiceDep
) -> ApiResponse[ProjectRead]:
    project = await projects.update_project(user, project_id, body)
    return ApiResponse[ProjectRead](data=ProjectRead.model_validate(project))


@router.delete(
    "/{project_id}",
    response_model=ApiResponse[Optional[ProjectRead]],
    summary="Delete Project",
    description="Delete a project and all of its asset records.",
    response_description="Empty success envelope.",
    responses=_NOT_FOUND,
)
async def delete_project(
    project_id: str, user: CurrentUser, projects: ProjectServiceDep
) -> ApiResponse[Optional[ProjectRead]]:
    await projects.delete_project(user, project_id)
    return ApiResponse[Optional[ProjectRead]](data=None)


@router.put(
    "/{project_id}/timeline",
    response_model=ApiResponse[ProjectRead],
    summary="Save Timeline",
    description="Validate and store the editor timeline. Its duration is recomputed from the clips.",
    response_description="The project with its stored timeline.",
    responses={**_NOT_FOUND, 400: {"description": "Timeline longer than the project's maximum duration"}},
)
async def save_timeline(
    project_id: str, body: TimelineUpdate, user: CurrentUser, projects: ProjectServiceDep
) -> ApiResponse[ProjectRead]:
    project = await projects.save_timeline(user, project_id, body.timeline)
    return ApiResponse[ProjectRead](data=ProjectRead.model_validate(project))


@router.post(
    "/{project_id}/assets",
    response_model=ApiResponse[AssetRead],
    status_code=status.HTTP_201_CREATED,
    summary="Add Asset",
    description="Register an uploaded file as a project asset. The storage key must point inside the upload area.",
    response_description="The created asset.",
    responses={**_NOT_FOUND, 400: {"description": "Storage key outside the upload area"}},
)
async def add_asset(
    project_id: str, body: AssetCreate, user: CurrentUser, projects: ProjectServiceDep
) -> ApiResponse[AssetRead]:
    asset = await projects.add_asset(user, project_id, body)
    return ApiResponse[AssetRead](data=AssetRead.model_validate(asset))


@router.delete(
    "/{project_id}/assets/{asset_id}",
    response_model=ApiResponse[Optional[AssetRead]],
    summary="Remove Asset",
    description="Remove an asset record from a project. The underlying file is left in place.",
    response_description="Empty success envelope.",
    responses={404: {"description": "Project or asset not found"}},
)
async def remove_asset(
    project_id: str, asset_id: str, user: CurrentUser, projects: ProjectServiceDep
) -> ApiResponse[Optional[AssetRead]]:
    await projects.remove_asset(user, project_id, asset_id)
    return ApiResponse[Optional[AssetRead]](data=None)
