"""Entity role permissions - a fixed lookup, no stored state"""

from types import MappingProxyType

from propcalc.domain.exceptions import PermissionDeniedError
from propcalc.domain.models import EntityPermissions, EntityRole

ROLE_PERMISSIONS = MappingProxyType({
    EntityRole.OWNER: EntityPermissions(
        can_write=True,
        can_manage_members=True,
        can_manage_banks=True,
        can_view_audit_log=True,
        can_upload_documents=True,
    ),
    EntityRole.ADMIN: EntityPermissions(
        can_write=True,
        can_manage_members=False,
        can_manage_banks=True,
        can_view_audit_log=True,
        can_upload_documents=True,
    ),
    EntityRole.MEMBER: EntityPermissions(
        can_write=True,
        can_manage_members=False,
        can_manage_banks=False,
        can_view_audit_log=False,
        can_upload_documents=True,
    ),
    # Read-only access for the accountant, who may still upload documents
    EntityRole.ACCOUNTANT: EntityPermissions(
        can_write=False,
        can_manage_members=False,
        can_manage_banks=False,
        can_view_audit_log=True,
        can_upload_documents=True,
    ),
})


def get_permissions(role: EntityRole | str) -> EntityPermissions:
    return ROLE_PERMISSIONS[EntityRole(role)]


def ensure_permission(role: EntityRole | str, permission: str) -> None:
    """
    Raises:
        PermissionDeniedError: role does not grant the permission
    """
    role = EntityRole(role)
    if not getattr(get_permissions(role), permission, False):
        raise PermissionDeniedError(role.value, permission)
