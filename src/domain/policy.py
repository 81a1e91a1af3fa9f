from enum import Enum
from typing import Any
from uuid import UUID

from src.domain.entities import Actor, Authenticated, Comment, Post
from src.domain.errors import AuthorizationDenied
from src.rules.models import PolicyRules


class Decision(Enum):
    ALLOW = "allow"
    DENY = "deny"


def resource_type_of(resource: Any) -> str:
    """Resource type name for an entity instance or a bare type name."""
    if isinstance(resource, Post):
        return "post"
    if isinstance(resource, Comment):
        return "comment"
    if isinstance(resource, str):
        return resource
    raise TypeError(f"Unsupported resource: {resource!r}")


def owner_id_of(resource: Any) -> UUID | None:
    if isinstance(resource, Post):
        return resource.owner_user_id
    if isinstance(resource, Comment):
        return resource.author_user_id
    return None


class PolicyEngine:
    def __init__(self, rules: PolicyRules):
        self.rules = rules

    def authorize(self, actor: Actor, action: str, resource: Any) -> Decision:
        """
        Decide whether the actor may perform the action on the resource.

        `resource` is a Post/Comment instance, or a type name ("post",
        "comment") for collection-level actions such as create.

        Order of precedence:
        1. Admin short-circuit
        2. Grant table, first matching grant wins
        3. Deny
        """
        if self.rules.admin_allows_all and actor.admin:
            return Decision.ALLOW

        resource_type = resource_type_of(resource)
        for grant in self.rules.grants:
            if grant.resource != resource_type or grant.action != action:
                continue
            if self._evaluate_condition(grant.if_condition, actor, resource):
                return Decision.ALLOW

        return Decision.DENY

    def check_permission(self, actor: Actor, action: str, resource: Any) -> bool:
        return self.authorize(actor, action, resource) is Decision.ALLOW

    def enforce(self, actor: Actor, action: str, resource: Any) -> None:
        """Raise AuthorizationDenied unless the actor is allowed."""
        if not self.check_permission(actor, action, resource):
            raise AuthorizationDenied(action, resource_type_of(resource))

    def _evaluate_condition(
        self,
        condition: dict[str, Any],
        actor: Actor,
        resource: Any,
    ) -> bool:
        """
        Evaluate condition predicates from rules.yaml.
        Supported predicates:
        - authenticated: bool
        - owns: bool (resource owner/author is the actor)
        - published: bool (post published flag)
        Unknown predicates never match.
        """
        for predicate, expected in condition.items():
            if predicate == "authenticated":
                if isinstance(actor, Authenticated) != bool(expected):
                    return False

            elif predicate == "owns":
                if self._owns(actor, resource) != bool(expected):
                    return False

            elif predicate == "published":
                if not isinstance(resource, Post):
                    return False
                if resource.published != bool(expected):
                    return False

            else:
                return False

        return True

    @staticmethod
    def _owns(actor: Actor, resource: Any) -> bool:
        # Guests never own anything, and an unset owner matches nobody.
        if not isinstance(actor, Authenticated):
            return False
        owner_id = owner_id_of(resource)
        if owner_id is None:
            return False
        return str(owner_id) == str(actor.user.id)
