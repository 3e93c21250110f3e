"""
Admin Endpoints.

Dashboard statistics, user management, the activity feed and announcement
management. Every route requires the ADMIN role, enforced once on the router.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from vibe_creator.core.models.io.admin import (
    ActivityItem,
    AdminStats,
    AdminUserDetail,
    AdminUserList,
    SubscriptionUpdateRequest,
)
from vibe_creator.core.models.io.announcements import AnnouncementCreate, AnnouncementRead, AnnouncementUpdate
from vibe_creator.core.models.io.common import ApiResponse, MessageData
from vibe_creator.core.models.io.payments import SubscriptionRead
from vibe_creator.server.services.deps import AdminServiceDep, AdminUser, get_admin_user
from vibe_creator.server.services.payment import to_subscription_read

router = APIRouter(dependencies=[Depends(get_admin_user)])


@router.get(
    "/stats",
    response_model=ApiResponse[AdminStats],
    summary="Dashboard Statistics",
    description="User, project, export and revenue totals for the admin dashboard.",
)
async def get_stats(admin: AdminServiceDep) -> ApiResponse[AdminStats]:
    return ApiResponse[AdminStats](data=await admin.get_stats())


@router.get(
    "/users",
    response_model=ApiResponse[AdminUserList],
    summary="List Users",
    description="Page through users, newest first. `search` matches email or name case-insensitively.",
)
async def list_users(
    admin: AdminServiceDep,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    search: Optional[str] = Query(None, description="Substring of the email or name"),
) -> ApiResponse[AdminUserList]:
    return ApiResponse[AdminUserList](data=await admin.list_users(page, limit, search))


@router.get(
    "/users/{user_id}",
    response_model=ApiResponse[AdminUserDetail],
    summary="Get User",
    description="User details with the latest 10 projects, exports and payments.",
    responses={404: {"description": "User not found"}},
)
async def get_user(user_id: str, admin: AdminServiceDep) -> ApiResponse[AdminUserDetail]:
    return ApiResponse[AdminUserDetail](data=await admin.get_user_detail(user_id))


@router.patch(
    "/users/{user_id}/subscription",
    response_model=ApiResponse[SubscriptionRead],
    summary="Set Subscription",
    description="Move a user to a tier, resetting usage. Paid tiers are valid for `validDays` days.",
    responses={404: {"description": "User not found"}},
)
async def update_subscription(
    user_id: str, body: SubscriptionUpdateRequest, admin: AdminServiceDep
) -> ApiResponse[SubscriptionRead]:
    subscription = await admin.update_subscription(user_id, body.tier, body.valid_days)
    return ApiResponse[SubscriptionRead](data=to_subscription_read(subscription))


@router.delete(
    "/users/{user_id}",
    response_model=ApiResponse[MessageData],
    summary="Delete User",
    description="Delete a user together with their sessions, projects, prompts, exports and payments.",
    responses={
        403: {"description": "Admins cannot delete their own account"},
        404: {"description": "User not found"},
    },
)
async def delete_user(user_id: str, current: AdminUser, admin: AdminServiceDep) -> ApiResponse[MessageData]:
    await admin.delete_user(current, user_id)
    return ApiResponse[MessageData](data=MessageData(message="User deleted"))


@router.get(
    "/activity",
    response_model=ApiResponse[List[ActivityItem]],
    summary="Recent Activity",
    description="Exports, payments and signups merged into one feed, newest first.",
)
async def recent_activity(
    admin: AdminServiceDep, limit: int = Query(20, ge=1, le=100)
) -> ApiResponse[List[ActivityItem]]:
    return ApiResponse[List[ActivityItem]](data=await admin.recent_activity(limit))


# Announcements


@router.get("/announcements", response_model=ApiResponse[List[AnnouncementRead]], summary="List Announcements")
async def list_announcements(admin: AdminServiceDep) -> ApiResponse[List[AnnouncementRead]]:
    items = await admin.list_announcements()
    return ApiResponse[List[AnnouncementRead]](data=[AnnouncementRead.model_validate(a) for a in items])


@router.post(
    "/announcements",
    response_model=ApiResponse[AnnouncementRead],
    status_code=status.HTTP_201_CREATED,
    summary="Create Announcement",
)
async def create_announcement(body: AnnouncementCreate, admin: AdminServiceDep) -> ApiResponse[AnnouncementRead]:
    announcement = await admin.create_announcement(body)
    return ApiResponse[AnnouncementRead](data=AnnouncementRead.model_validate(announcement))


@router.patch(
    "/announcements/{announcement_id}",
    response_model=ApiResponse[AnnouncementRead],
    summary="Update Announcement",
    responses={404: {"description": "Announcement not found"}},
)
async def update_announcement(
    announcement_id: str, body: AnnouncementUpdate, admin: AdminServiceDep
) -> ApiResponse[AnnouncementRead]:
    announcement = await admin.update_announcement(announcement_id, body)
    return ApiResponse[AnnouncementRead](data=AnnouncementRead.model_validate(announcement))


@router.delete(
    "/announcements/{announcement_id}",
    response_model=ApiResponse[MessageData],
    summary="Delete Announcement",
    responses={404: {"description": "Announcement not found"}},
)
async def delete_announcement(announcement_id: str, admin: AdminServiceDep) -> ApiResponse[MessageData]:
    await admin.delete_announcement(announcement_id)
    return ApiResponse[MessageData](data=MessageData(message="Announcement deleted"))
