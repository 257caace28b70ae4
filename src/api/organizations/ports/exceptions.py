"""Port-level exceptions for the organizations bounded context."""


class DuplicateOrganizationCodeError(Exception):
    """Raised when an organization code is already used within the tenant.

    Codes are unique per tenant only; two tenants may share a code.
    """

    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Organization code '{code}' already exists")


class ParentOrganizationNotFoundError(Exception):
    """Raised when the requested parent is not visible to the current tenant."""

    def __init__(self, parent_id: str):
        self.parent_id = parent_id
        super().__init__(f"Parent organization {parent_id} not found")
