from typing import Literal

from pydantic import BaseModel, Field


class ProjectRules(BaseModel):
    slug: str
    rules_version: str

class PostRules(BaseModel):
    page_size: int = Field(default=20, ge=1, le=100)
    title_max_length: int = Field(default=255, ge=1)

class SessionCookieRules(BaseModel):
    name: str = "postboard_session"
    secure: bool = False
    http_only: bool = True
    same_site: Literal["lax", "strict", "none"] = "lax"

class SessionsRules(BaseModel):
    ttl_minutes: int = Field(default=60 * 24, ge=1)
    rotate_on_login: bool = True
    cookie: SessionCookieRules = Field(default_factory=SessionCookieRules)

class OpsRules(BaseModel):
    required_env: list[str] = Field(default_factory=list)

class Rules(BaseModel):
    project: ProjectRules
    posts: PostRules = Field(default_factory=PostRules)
    sessions: SessionsRules = Field(default_factory=SessionsRules)
    ops: OpsRules = Field(default_factory=OpsRules)
