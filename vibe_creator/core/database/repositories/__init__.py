"""
Database repository layer using SQLModel.

Each module provides async data access for one aggregate. All repositories
share the CRUD operations of :class:`AsyncBaseRepository`.

Modules:
- base: AsyncBaseRepository and AsyncQueryBuilder utilities
- users: Users and login sessions
- subscriptions: Subscriptions and payment history
- projects: Projects and project assets
- prompts: Prompts and prompt versions
- exports: Export jobs
- announcements: Announcements
"""

from .announcements import AnnouncementRepository
from .base import AsyncBaseRepository, AsyncQueryBuilder
from .exports import ExportRepository
from .projects import ProjectAssetRepository, ProjectRepository
from .prompts import PromptRepository, PromptVersionRepository
from .subscriptions import PaymentRepository, SubscriptionRepository
from .users import UserRepository, UserSessionRepository

__all__ = [
    "AnnouncementRepository",
    "AsyncBaseRepository",
    "AsyncQueryBuilder",
    "ExportRepository",
    "PaymentRepository",
    "ProjectAssetRepository",
    "ProjectRepository",
    "PromptRepository",
    "PromptVersionRepository",
    "SubscriptionRepository",
    "UserRepository",
    "UserSessionRepository",
]
