"""
Auth component - Login, session issue/verification and logout.
"""

from .component import (
    run,
    run_create_session,
    run_login,
    run_logout,
    run_verify_session,
)
from .models import (
    AuthOutput,
    CreateSessionInput,
    LoginInput,
    LogoutInput,
    VerifySessionInput,
)
from .ports import AuthAdapterPort, SessionStorePort, TimePort, UserRepoPort

__all__ = [
    # Entry points
    "run",
    "run_create_session",
    "run_login",
    "run_logout",
    "run_verify_session",
    # Models
    "AuthOutput",
    "CreateSessionInput",
    "LoginInput",
    "LogoutInput",
    "VerifySessionInput",
    # Ports
    "AuthAdapterPort",
    "SessionStorePort",
    "TimePort",
    "UserRepoPort",
]
