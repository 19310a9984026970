"""Role-gated permissions.

Every decision about what a user sees (feed tabs, feed scope) and what they
may do (publish a service or a request, rate somebody) is taken here, from
the role values alone. All functions are pure and total: a role that is not
one of the known values simply grants nothing.
"""

from __future__ import annotations

from dataclasses import dataclass

from agrom.common.enums import FeedKind, FeedScope, UserRole

RoleLike = UserRole | str | None

_CONTRACTOR_CRITERIA = ["Compromiso", "Cumplimiento", "Responsabilidad", "Calidad"]
_PRODUCER_CRITERIA = ["Pago", "Responsabilidad", "Accesibilidad"]


@dataclass(frozen=True)
class Tab:
    kind: FeedKind
    label: str
    scope: FeedScope

    @property
    def manages_own(self) -> bool:
        return self.scope == FeedScope.OWN


def coerce_role(role: RoleLike) -> UserRole | None:
    if isinstance(role, UserRole):
        return role
    try:
        return UserRole(role)
    except ValueError:
        return None


def acts_as_producer(role: RoleLike) -> bool:
    return coerce_role(role) in (UserRole.PRODUCER, UserRole.BOTH)


def acts_as_contractor(role: RoleLike) -> bool:
    return coerce_role(role) in (UserRole.CONTRACTOR, UserRole.BOTH)


def can_create_service(role: RoleLike) -> bool:
    return acts_as_contractor(role)


def can_create_request(role: RoleLike) -> bool:
    return acts_as_producer(role)


def service_scope(role: RoleLike) -> FeedScope:
    if acts_as_contractor(role):
        return FeedScope.OWN
    if coerce_role(role) == UserRole.PRODUCER:
        return FeedScope.ALL
    return FeedScope.NONE


def request_scope(role: RoleLike) -> FeedScope:
    if acts_as_producer(role):
        return FeedScope.OWN
    if coerce_role(role) == UserRole.CONTRACTOR:
        return FeedScope.ALL
    return FeedScope.NONE


def visible_tabs(role: RoleLike) -> list[Tab]:
    """Feed tabs for a role, in display order."""
    role = coerce_role(role)
    if role == UserRole.PRODUCER:
        return [
            Tab(FeedKind.SERVICES, "Servicios", FeedScope.ALL),
            Tab(FeedKind.REQUESTS, "Mis Solicitudes", FeedScope.OWN),
        ]
    if role == UserRole.CONTRACTOR:
        return [
            Tab(FeedKind.REQUESTS, "Solicitudes", FeedScope.ALL),
            Tab(FeedKind.SERVICES, "Mis Servicios", FeedScope.OWN),
        ]
    if role == UserRole.BOTH:
        return [
            Tab(FeedKind.SERVICES, "Servicios", FeedScope.OWN),
            Tab(FeedKind.REQUESTS, "Solicitudes", FeedScope.OWN),
        ]
    return []


def default_tab(role: RoleLike) -> FeedKind | None:
    role = coerce_role(role)
    if role is None:
        return None
    return FeedKind.SERVICES if role == UserRole.PRODUCER else FeedKind.REQUESTS


def _complementary(viewer: UserRole | None, subject: UserRole | None) -> bool:
    if viewer is None or subject is None:
        return False
    if subject == UserRole.CONTRACTOR:
        return acts_as_producer(viewer)
    if subject == UserRole.PRODUCER:
        return acts_as_contractor(viewer)
    # A user holding both roles can be rated from either side
    return True


def can_rate(
    viewer_role: RoleLike,
    subject_role: RoleLike,
    viewer_id: str | None,
    subject_id: str | None,
) -> bool:
    if not viewer_id or not subject_id or viewer_id == subject_id:
        return False
    return _complementary(coerce_role(viewer_role), coerce_role(subject_role))


def rating_denial_reason(
    viewer_role: RoleLike,
    subject_role: RoleLike,
    viewer_id: str | None,
    subject_id: str | None,
) -> str | None:
    """User-facing reason a rating is refused, or None when it is allowed."""
    if can_rate(viewer_role, subject_role, viewer_id, subject_id):
        return None
    if not viewer_id:
        return "No estás autenticado"
    if viewer_id == subject_id:
        return "No puedes valorarte a ti mismo"
    subject = coerce_role(subject_role)
    if subject == UserRole.CONTRACTOR:
        return "Solo los productores pueden valorar contratistas"
    if subject == UserRole.PRODUCER:
        return "Solo los contratistas pueden valorar productores"
    return "No tienes permiso para valorar a este usuario"


def rating_criteria(subject_role: RoleLike) -> list[str]:
    subject = coerce_role(subject_role)
    if subject == UserRole.CONTRACTOR:
        return list(_CONTRACTOR_CRITERIA)
    if subject == UserRole.PRODUCER:
        return list(_PRODUCER_CRITERIA)
    if subject == UserRole.BOTH:
        return _CONTRACTOR_CRITERIA + [c for c in _PRODUCER_CRITERIA if c not in _CONTRACTOR_CRITERIA]
    return []


@dataclass(frozen=True)
class ViewerPolicy:
    """The policy functions bound to the signed-in viewer."""

    viewer_id: str
    role: RoleLike

    @property
    def tabs(self) -> list[Tab]:
        return visible_tabs(self.role)

    @property
    def default_tab(self) -> FeedKind | None:
        return default_tab(self.role)

    @property
    def can_create_service(self) -> bool:
        return can_create_service(self.role)

    @property
    def can_create_request(self) -> bool:
        return can_create_request(self.role)

    @property
    def service_scope(self) -> FeedScope:
        return service_scope(self.role)

    @property
    def request_scope(self) -> FeedScope:
        return request_scope(self.role)

    def scope_for(self, kind: FeedKind) -> FeedScope:
        return self.service_scope if kind == FeedKind.SERVICES else self.request_scope

    def can_rate(self, subject_role: RoleLike, subject_id: str | None) -> bool:
        return can_rate(self.role, subject_role, self.viewer_id, subject_id)

    def rating_denial_reason(self, subject_role: RoleLike, subject_id: str | None) -> str | None:
        return rating_denial_reason(self.role, subject_role, self.viewer_id, subject_id)
