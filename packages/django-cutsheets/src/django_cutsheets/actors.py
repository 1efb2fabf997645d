"""Principals performing cut sheet operations.

Authentication lives outside this package. An Actor is the minimal identity
the engine needs: the user, their organization and whether that
organization is a producer or a processor.
"""
from dataclasses import dataclass
from typing import Optional

from django.utils.module_loading import import_string

from .choices import ActorRole
from .conf import get_setting
from .exceptions import NotAuthenticated
from .middleware import get_current_actor


@dataclass(frozen=True)
class Actor:
    user_id: str
    organization_id: str
    organization_type: str

    @property
    def role(self) -> str:
        return self.organization_type

    @property
    def is_processor(self) -> bool:
        return self.organization_type == ActorRole.PROCESSOR

    @property
    def is_producer(self) -> bool:
        return self.organization_type == ActorRole.PRODUCER


def default_actor_resolver(user) -> Optional[Actor]:
    """Build an Actor from ``organization_id``/``organization_type`` on the user."""
    if user is None or not getattr(user, 'is_authenticated', False):
        return None
    organization_id = getattr(user, 'organization_id', None)
    organization_type = getattr(user, 'organization_type', None)
    if not organization_id or organization_type not in ActorRole.values:
        return None
    return Actor(
        user_id=str(user.pk),
        organization_id=str(organization_id),
        organization_type=str(organization_type),
    )


def resolve_actor(user) -> Optional[Actor]:
    """Resolve the Actor for a user via CUTSHEETS_ACTOR_RESOLVER."""
    resolver_path = get_setting('ACTOR_RESOLVER')
    resolver = import_string(resolver_path) if resolver_path else default_actor_resolver
    return resolver(user)


def require_actor(actor: Optional[Actor] = None) -> Actor:
    """Return the explicit actor, else the request's actor.

    Raises:
        NotAuthenticated: If neither is available
    """
    actor = actor or get_current_actor()
    if actor is None:
        raise NotAuthenticated()
    return actor
