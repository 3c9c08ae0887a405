from .users_api import UsersApi
from .profile_api import ProfileApi
from .threads_api import ThreadsApi
from .members_api import MembersApi
from .messages_api import MessagesApi
from .groups_api import GroupsApi
from .content_api import ContentApi

__all__ = ["UsersApi", "ProfileApi", "ThreadsApi", "MembersApi", "MessagesApi", "GroupsApi", "ContentApi"]
