"""
SQLAlchemy models
"""
# Import all models here so Alembic can detect them
from app.core.database import Base
from app.models.file import (FILE_TYPE_MIME_TYPES, FileType,  # noqa: F401
                             ProjectFile)
from app.models.interaction import Comment, Like  # noqa: F401
from app.models.messaging import (Discussion, DiscussionType,  # noqa: F401
                                  Message, Notification, NotificationType)
from app.models.offer import (Connect, ConnectStatus, Offer,  # noqa: F401
                              OfferStatus)
from app.models.post import (MediaType, Post, PostMedia,  # noqa: F401
                             PostShared, Video, View)
from app.models.profile import (AttemptLog, Block,  # noqa: F401
                                ExperienceEducation, ExperienceType, Follow,
                                SocialMedia, Team, TeamUser)
from app.models.project import (Interest, Partnership, Project,  # noqa: F401
                                ProjectStage, ProjectStatus, ProjectTag,
                                Sector, Tag, UseOfFunds,
                                VisitorProfileProject)
from app.models.token_blacklist import BlacklistedToken  # noqa: F401
from app.models.user import User, UserRole  # noqa: F401

__all__ = [
    "Base",
    # Users
    "User",
    "UserRole",
    "Team",
    "TeamUser",
    "SocialMedia",
    "ExperienceEducation",
    "ExperienceType",
    "Follow",
    "Block",
    "AttemptLog",
    # Projects
    "Project",
    "ProjectStatus",
    "ProjectStage",
    "Sector",
    "Partnership",
    "UseOfFunds",
    "Interest",
    "VisitorProfileProject",
    "Tag",
    "ProjectTag",
    "Offer",
    "OfferStatus",
    "Connect",
    "ConnectStatus",
    # Media
    "Post",
    "PostMedia",
    "PostShared",
    "MediaType",
    "Video",
    "View",
    "ProjectFile",
    "FileType",
    "FILE_TYPE_MIME_TYPES",
    # Social
    "Comment",
    "Like",
    "Discussion",
    "DiscussionType",
    "Message",
    "Notification",
    "NotificationType",
    # Security
    "BlacklistedToken",
]
