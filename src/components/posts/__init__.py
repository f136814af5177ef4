"""
Posts component - Visibility-filtered reads and owner-only writes.
"""

from .component import (
    run,
    run_create,
    run_delete,
    run_get,
    run_list,
    run_update,
)
from .models import (
    CreatePostInput,
    DeletePostInput,
    DeletePostOutput,
    GetPostInput,
    ListPostsInput,
    PostError,
    PostErrorCode,
    PostListOutput,
    PostOutput,
    UpdatePostInput,
)
from .ports import PostRepoPort, TimePort, UserLookupPort

__all__ = [
    # Entry points
    "run",
    "run_create",
    "run_delete",
    "run_get",
    "run_list",
    "run_update",
    # Input models
    "CreatePostInput",
    "DeletePostInput",
    "GetPostInput",
    "ListPostsInput",
    "UpdatePostInput",
    # Output models
    "DeletePostOutput",
    "PostError",
    "PostErrorCode",
    "PostListOutput",
    "PostOutput",
    # Ports
    "PostRepoPort",
    "TimePort",
    "UserLookupPort",
]
