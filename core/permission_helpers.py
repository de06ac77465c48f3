from collections.abc import Mapping
from typing import Any, Dict, Iterable, List, Optional, Set, Union

from fastapi import Depends, HTTPException

from core.errors import (
    EmptyGrant,
    InvalidPermissionArgument,
    UnknownAction,
    UnknownEntity,
)
from core.logging_config import logger
from core.permissions import FULL_ACCESS_PERMISSIONS, GUARD_PERMISSIONS
from dependencies.auth import get_current_actor
from models.actor import AdminActor, GuardActor
from models.enums import AccountType, PermissionAction, PermissionEntity


ActorLike = Optional[Union[AdminActor, GuardActor]]
EntityLike = Union[PermissionEntity, str]
ActionLike = Union[PermissionAction, str]


# -----------------------------------------------------
# Boundary coercion: unknown literals are caller defects
# -----------------------------------------------------
def _coerce_entity(entity: EntityLike) -> PermissionEntity:
    try:
        return PermissionEntity(entity)
    except ValueError:
        raise InvalidPermissionArgument(f"Unknown permission entity: {entity!r}") from None


def _coerce_action(action: ActionLike) -> PermissionAction:
    try:
        return PermissionAction(action)
    except ValueError:
        raise InvalidPermissionArgument(f"Unknown permission action: {action!r}") from None


def _check_actor(actor: Any) -> None:
    if actor is not None and not isinstance(actor, (AdminActor, GuardActor)):
        raise InvalidPermissionArgument(f"Not an actor: {type(actor).__name__}")


def _is_live(actor: ActorLike) -> bool:
    return actor is not None and actor.is_active is True


def is_super_admin(actor: ActorLike) -> bool:
    return (
        isinstance(actor, AdminActor)
        and actor.account_type == AccountType.super_admin
    )


# -----------------------------------------------------
# Permission evaluation
# -----------------------------------------------------
def has_permission(actor: ActorLike, entity: EntityLike, action: ActionLike) -> bool:
    entity = _coerce_entity(entity)
    action = _coerce_action(action)
    _check_actor(actor)

    if not _is_live(actor):
        return False

    if isinstance(actor, GuardActor):
        return action in GUARD_PERMISSIONS.get(entity, ())

    if actor.account_type == AccountType.super_admin:
        return True

    if actor.account_type == AccountType.full_access:
        return action in FULL_ACCESS_PERMISSIONS.get(entity, ())

    if actor.account_type == AccountType.custom:
        granted = actor.permissions.get(entity)
        if granted is None:
            # No key for the entity means no actions on it
            return False
        return action in granted

    return False


def has_project_access(actor: ActorLike, project_id: str) -> bool:
    if project_id is None or not isinstance(project_id, str):
        raise InvalidPermissionArgument(f"Invalid project id: {project_id!r}")
    _check_actor(actor)

    if not _is_live(actor):
        return False

    if isinstance(actor, GuardActor):
        return project_id == actor.project_id

    if actor.account_type == AccountType.super_admin:
        return True

    return project_id in actor.assigned_projects


def can_access(
    actor: ActorLike,
    entity: EntityLike,
    action: ActionLike,
    project_id: Optional[str] = None,
) -> bool:
    """Permitted in principle AND allowed inside this project (when given)."""
    if not has_permission(actor, entity, action):
        return False
    if project_id is None:
        return True
    return has_project_access(actor, project_id)


def _project_id_of(project: Any) -> Optional[str]:
    if isinstance(project, Mapping):
        return project.get("id")
    return getattr(project, "id", None)


def filter_projects_for_actor(actor: ActorLike, all_projects: Iterable[Any]) -> List[Any]:
    """
    Projects the actor may see, in input order.

    Accepts Supabase rows (dicts with "id") or models with an `.id`.
    """
    _check_actor(actor)
    all_projects = list(all_projects)

    if not _is_live(actor):
        return []

    if is_super_admin(actor):
        return all_projects

    if isinstance(actor, GuardActor):
        return [p for p in all_projects if _project_id_of(p) == actor.project_id]

    return [p for p in all_projects if _project_id_of(p) in actor.assigned_projects]


# -----------------------------------------------------
# Effective permission matrix (for the console navigation)
# -----------------------------------------------------
def get_effective_permissions(actor: ActorLike) -> Dict[PermissionEntity, Set[PermissionAction]]:
    effective = {}
    for entity in PermissionEntity:
        actions = {a for a in PermissionAction if has_permission(actor, entity, a)}
        if actions:
            effective[entity] = actions
    return effective


# -----------------------------------------------------
# Custom grant validation (creation / approval time only)
# -----------------------------------------------------
def validate_permission_grant(permissions: Optional[Mapping]) -> Dict[PermissionEntity, Set[PermissionAction]]:
    """
    Check a custom admin's grant before it is stored.

    Order matters, first failure wins:
      1. EmptyGrant    : no entity carries at least one action
      2. UnknownEntity : a key outside the entity enumeration
      3. UnknownAction : an action outside the action enumeration,
                         reported per (entity, action) pair

    Returns the grant normalized to enums, with empty entries dropped.
    """
    if permissions is None:
        permissions = {}
    if not isinstance(permissions, Mapping):
        raise InvalidPermissionArgument(f"Permission grant must be a mapping, got {type(permissions).__name__}")

    for entity, actions in permissions.items():
        if actions is not None and not isinstance(actions, (list, tuple, set, frozenset)):
            raise InvalidPermissionArgument(
                f"Actions for {entity!r} must be a list or set, got {type(actions).__name__}"
            )

    grant = {str(entity): list(actions or []) for entity, actions in permissions.items()}

    if not any(grant.values()):
        raise EmptyGrant()

    unknown_entities = [e for e in grant if e not in PermissionEntity.list()]
    if unknown_entities:
        raise UnknownEntity(unknown_entities)

    unknown_actions = [
        (entity, str(action))
        for entity, actions in grant.items()
        for action in actions
        if str(action) not in PermissionAction.list()
    ]
    if unknown_actions:
        raise UnknownAction(unknown_actions)

    return {
        PermissionEntity(entity): {PermissionAction(str(a)) for a in actions}
        for entity, actions in grant.items()
        if actions
    }


# -----------------------------------------------------
# FastAPI dependency wrappers
# -----------------------------------------------------
def _deny(actor: ActorLike, what: str):
    logger.warning(f"Permission denied for {getattr(actor, 'id', 'anonymous')}: {what}")
    raise HTTPException(status_code=403, detail=f"Insufficient permissions: '{what}' required")


def requires_permission(entity: EntityLike, action: ActionLike):
    """
    Usage:
        @router.get("/", dependencies=[Depends(requires_permission("guards", "read"))])
    """
    entity = _coerce_entity(entity)
    action = _coerce_action(action)

    def dependency(actor: ActorLike = Depends(get_current_actor)):
        if not has_permission(actor, entity, action):
            _deny(actor, f"{entity}:{action}")
        return actor

    return dependency


def requires_project_permission(entity: EntityLike, action: ActionLike):
    """
    Same as requires_permission, scoped to the `project_id` path parameter.
    """
    entity = _coerce_entity(entity)
    action = _coerce_action(action)

    def dependency(project_id: str, actor: ActorLike = Depends(get_current_actor)):
        if not has_permission(actor, entity, action):
            _deny(actor, f"{entity}:{action}")
        if not has_project_access(actor, project_id):
            logger.warning(f"Project access denied for {getattr(actor, 'id', 'anonymous')}: {project_id}")
            raise HTTPException(status_code=403, detail=f"You do not have access to project {project_id}")
        return actor

    return dependency


def require_project_access(actor: ActorLike, project_id: str):
    """Raise 403 if the actor may not act inside this project."""
    if not has_project_access(actor, project_id):
        raise HTTPException(status_code=403, detail=f"You do not have access to project {project_id}")


def require_super_admin(actor: ActorLike = Depends(get_current_actor)):
    if not (_is_live(actor) and is_super_admin(actor)):
        raise HTTPException(status_code=403, detail="super_admin account required")
    return actor
