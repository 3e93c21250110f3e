"""
Database entity models.

Modules:
- users: Accounts and login sessions
- subscriptions: Subscription plans and payment history
- projects: Editing projects and their media assets
- prompts: Prompt briefs and their generated versions
- exports: Export job records
- announcements: Site-wide announcements
"""

from .announcements import Announcement
from .exports import ExportHistory
from .projects import Project, ProjectAsset
from .prompts import Prompt, PromptVersion
from .subscriptions import PaymentHistory, Subscription
from .users import User, UserSession

__all__ = [
    "Announcement",
    "ExportHistory",
    "PaymentHistory",
    "Project",
    "ProjectAsset",
    "Prompt",
    "PromptVersion",
    "Subscription",
    "User",
    "UserSession",
]
