"""ORM tables and pydantic domain models.

Importing this package registers every table on ``Base.metadata``.
"""

from .message_db import ConversationDB, MessageDB
from .participation_db import ParticipationDB
from .preference_db import ProjectHideDB, ProjectLikeDB
from .project_db import CommentDB, ProgressUpdateDB, ProjectDB
from .reaction_db import ReactionDB
from .skill_db import ProjectRequiredSkillDB, UserSkillDB
from .user import User

__all__ = [
    "CommentDB",
    "ConversationDB",
    "MessageDB",
    "ParticipationDB",
    "ProgressUpdateDB",
    "ProjectDB",
    "ProjectHideDB",
    "ProjectLikeDB",
    "ProjectRequiredSkillDB",
    "ReactionDB",
    "User",
    "UserSkillDB",
]
