# ============================================
# CENTRALIZED ACCOUNT TYPE → PERMISSIONS MAP
# ============================================
from models.enums import AccountType, PermissionEntity as E, PermissionAction as A


_RWD = frozenset({A.read, A.write, A.delete})


# =====================================================
# FULL ACCESS: fixed grant table, restricted to the
# admin's assigned projects
# =====================================================
FULL_ACCESS_PERMISSIONS = {
    E.users: _RWD,
    E.units: _RWD,
    E.logs: frozenset({A.read}),
    E.services: _RWD,
    E.academies: _RWD,
    E.courts: _RWD,
    E.bookings: _RWD,
    E.complaints: _RWD,
    E.news: _RWD,
    E.notifications: frozenset({A.read, A.write, A.delete, A.send}),
    E.store: _RWD,
    E.orders: _RWD,
    E.gate_pass: _RWD,
    E.guidelines: _RWD,
    E.ads: _RWD,
    E.fines: _RWD,
    E.support: _RWD,
    E.guards: _RWD,
    E.device_keys: _RWD,
    E.admin_accounts: frozenset({A.read}),
}


# =====================================================
# SUPER ADMIN: same shape, plus admin account management.
# Never consulted during evaluation (super_admin is
# unconditional); published for the grant editor.
# =====================================================
SUPER_ADMIN_PERMISSIONS = {
    **FULL_ACCESS_PERMISSIONS,
    E.admin_accounts: frozenset({A.create, A.read, A.write, A.delete}),
}


# =====================================================
# GUARD: read users, nothing else
# =====================================================
GUARD_PERMISSIONS = {
    E.users: frozenset({A.read}),
}


DEFAULT_PERMISSIONS = {
    AccountType.super_admin: SUPER_ADMIN_PERMISSIONS,
    AccountType.full_access: FULL_ACCESS_PERMISSIONS,
    AccountType.custom: {},
}
