from enum import Enum


class BaseStrEnum(str, Enum):
    """
    Base enum that serializes cleanly to a string
    and provides a .list() method for UI dropdowns.
    """

    def __str__(self):
        return str(self.value)

    @classmethod
    def list(cls):
        return [item.value for item in cls]


# -----------------------------------------------------
# ADMIN ACCOUNT TYPE
# -----------------------------------------------------
class AccountType(BaseStrEnum):
    """Permission tier of an admin account."""

    super_admin = "super_admin"
    full_access = "full_access"
    custom = "custom"


# -----------------------------------------------------
# PERMISSION ENTITY
# -----------------------------------------------------
class PermissionEntity(BaseStrEnum):
    """Resource categories subject to access control."""

    users = "users"
    units = "units"
    logs = "logs"
    services = "services"
    academies = "academies"
    courts = "courts"
    bookings = "bookings"
    complaints = "complaints"
    news = "news"
    notifications = "notifications"
    store = "store"
    orders = "orders"
    gate_pass = "gate_pass"
    guidelines = "guidelines"
    ads = "ads"
    fines = "fines"
    support = "support"
    guards = "guards"
    device_keys = "device_keys"
    admin_accounts = "admin_accounts"


# -----------------------------------------------------
# PERMISSION ACTION
# -----------------------------------------------------
class PermissionAction(BaseStrEnum):
    """Operation kinds applied to an entity."""

    read = "read"
    write = "write"
    delete = "delete"
    create = "create"
    send = "send"


# -----------------------------------------------------
# PENDING ADMIN REQUEST STATUS
# -----------------------------------------------------
class RequestStatus(BaseStrEnum):
    """Workflow state of a self-registered admin request."""

    pending = "pending"
    approved = "approved"
    rejected = "rejected"
