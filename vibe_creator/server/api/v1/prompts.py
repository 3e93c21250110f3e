"""
Prompt Endpoints.

Versioned creative briefs. Creating a prompt or adding a version renders the
brief through the template for the prompt's type and stores the text with the
inputs that produced it.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Query, Response, status

from vibe_creator.core.models.domain.enums import PromptType
from vibe_creator.core.models.io.common import ApiResponse
from vibe_creator.core.models.io.prompts import (
    PromptCreate,
    PromptCreated,
    PromptDetail,
    PromptListItem,
    PromptRead,
    PromptUpdate,
    PromptVersionCreate,
    PromptVersionRead,
    RegeneratedPrompt,
)
from vibe_creator.server.core import constant
from vibe_creator.server.services.deps import CurrentUser, PromptServiceDep

router = APIRouter()

_NOT_FOUND = {404: {"description": "Prompt not found"}}


@router.get(
    "",
    response_model=ApiResponse[List[PromptListItem]],
    summary="List Prompts",
    description="List the user's prompts, optionally filtered by type, with their latest generated text.",
    response_description="A page of prompts with pagination metadata.",
)
async def list_prompts(
    user: CurrentUser,
    prompts: PromptServiceDep,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1),
    type: Optional[PromptType] = Query(None, description="Only return prompts of this type"),
) -> ApiResponse[List[PromptListItem]]:
    items, meta = await prompts.list_prompts(user, type, page, min(limit, constant.MAX_LIMIT))
    return ApiResponse[List[PromptListItem]](data=items, meta=meta)


@router.get(
    "/{prompt_id}",
    response_model=ApiResponse[PromptDetail],
    summary="Get Prompt",
    description="Return a prompt with all of its versions, newest first.",
    responses=_NOT_FOUND,
)
async def get_prompt(prompt_id: str, user: CurrentUser, prompts: PromptServiceDep) -> ApiResponse[PromptDetail]:
    return ApiResponse[PromptDetail](data=await prompts.get_detail(user, prompt_id))


@router.post(
    "",
    response_model=ApiResponse[PromptCreated],
    status_code=status.HTTP_201_CREATED,
    summary="Create Prompt",
    description="Create a prompt and its first version from the given brief.",
    response_description="The prompt, version 1 and the generated text.",
)
async def create_prompt(body: PromptCreate, user: CurrentUser, prompts: PromptServiceDep) -> ApiResponse[PromptCreated]:
    return ApiResponse[PromptCreated](data=await prompts.create_prompt(user, body))


@router.post(
    "/{prompt_id}/versions",
    response_model=ApiResponse[PromptVersionRead],
    status_code=status.HTTP_201_CREATED,
    summary="Add Version",
    description="Store a new version generated from the given brief and make it current.",
    responses=_NOT_FOUND,
)
async def add_version(
    prompt_id: str, body: PromptVersionCreate, user: CurrentUser, prompts: PromptServiceDep
) -> ApiResponse[PromptVersionRead]:
    version = await prompts.add_version(user, prompt_id, body)
    return ApiResponse[PromptVersionRead](data=PromptVersionRead.model_validate(version))


@router.get(
    "/{prompt_id}/versions/{version}",
    response_model=ApiResponse[PromptVersionRead],
    summary="Get Version",
    responses={404: {"description": "Prompt or version not found"}},
)
async def get_version(
    prompt_id: str, version: int, user: CurrentUser, prompts: PromptServiceDep
) -> ApiResponse[PromptVersionRead]:
    found = await prompts.get_version(user, prompt_id, version)
    return ApiResponse[PromptVersionRead](data=PromptVersionRead.model_validate(found))


@router.patch(
    "/{prompt_id}",
    response_model=ApiResponse[PromptRead],
    summary="Rename Prompt",
    responses=_NOT_FOUND,
)
async def rename_prompt(
    prompt_id: str, body: PromptUpdate, user: CurrentUser, prompts: PromptServiceDep
) -> ApiResponse[PromptRead]:
    prompt = await prompts.rename(user, prompt_id, body.title)
    return ApiResponse[PromptRead](data=PromptRead.model_validate(prompt))


@router.delete(
    "/{prompt_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete Prompt",
    description="Delete a prompt with all of its versions.",
    responses=_NOT_FOUND,
)
async def delete_prompt(prompt_id: str, user: CurrentUser, prompts: PromptServiceDep) -> Response:
    await prompts.delete_prompt(user, prompt_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{prompt_id}/regenerate",
    response_model=ApiResponse[RegeneratedPrompt],
    summary="Regenerate Prompt",
    description="Render the latest version's brief again without storing a new version.",
    responses={404: {"description": "Prompt not found or it has no versions"}},
)
async def regenerate_prompt(
    prompt_id: str, user: CurrentUser, prompts: PromptServiceDep
) -> ApiResponse[RegeneratedPrompt]:
    text = await prompts.regenerate(user, prompt_id)
    return ApiResponse[RegeneratedPrompt](data=RegeneratedPrompt(generated_prompt=text))
