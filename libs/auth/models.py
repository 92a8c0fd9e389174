from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

ADMIN_ROLES = frozenset({"admin", "super_admin", "service_role"})
VENDOR_ROLE = "vendor"


class AuthUser(BaseModel):
    """
    Represents an authenticated dashboard user decoded from the bearer token.
    """

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="sub")
    email: Optional[EmailStr] = None
    role: str = "customer"

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES

    @property
    def is_vendor(self) -> bool:
        return self.role == VENDOR_ROLE
