from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class ProjectRules(BaseModel):
    slug: str = "blog-lab"
    rules_version: str = "1"


class Grant(BaseModel):
    resource: Literal["post", "comment"]
    action: str
    if_condition: dict[str, Any] = Field(default_factory=dict, alias="if")

    model_config = ConfigDict(populate_by_name=True)


def _default_grants() -> list[Grant]:
    return [
        # Posts
        Grant(resource="post", action="read", if_condition={"published": True}),
        Grant(resource="post", action="read", if_condition={"owns": True}),
        Grant(resource="post", action="create", if_condition={"authenticated": True}),
        Grant(resource="post", action="update", if_condition={"owns": True}),
        Grant(resource="post", action="destroy", if_condition={"owns": True}),
        Grant(resource="post", action="publish", if_condition={"owns": True}),
        # Comments
        Grant(resource="comment", action="read", if_condition={"authenticated": True}),
        Grant(resource="comment", action="create", if_condition={"authenticated": True}),
        Grant(resource="comment", action="update", if_condition={"owns": True}),
        Grant(resource="comment", action="destroy", if_condition={"owns": True}),
    ]


class PolicyRules(BaseModel):
    admin_allows_all: bool = True
    grants: list[Grant] = Field(default_factory=_default_grants)


class RangeRule(BaseModel):
    min: int
    max: int | None = None


class ContentRules(BaseModel):
    title: RangeRule = Field(default_factory=lambda: RangeRule(min=5))
    body: RangeRule = Field(default_factory=lambda: RangeRule(min=1))
    comment_body: RangeRule = Field(default_factory=lambda: RangeRule(min=1))


class SchedulingRules(BaseModel):
    auto_publish_delay_seconds: int = 3600
    max_attempts: int = 3
    retry_delay_seconds: int = 60
    poll_interval_seconds: float = 30.0
    max_tasks_per_run: int = 10


class AdminBootstrapRules(BaseModel):
    email_env: str = "BLOG_ADMIN_EMAIL"
    password_env: str = "BLOG_ADMIN_PASSWORD"
    default_email: str = "admin@example.com"


class OpsRules(BaseModel):
    required_env: list[str] = Field(default_factory=list)
    bootstrap_admin: AdminBootstrapRules = Field(default_factory=AdminBootstrapRules)


class Rules(BaseModel):
    project: ProjectRules = Field(default_factory=ProjectRules)
    policy: PolicyRules = Field(default_factory=PolicyRules)
    content: ContentRules = Field(default_factory=ContentRules)
    scheduling: SchedulingRules = Field(default_factory=SchedulingRules)
    ops: OpsRules = Field(default_factory=OpsRules)
