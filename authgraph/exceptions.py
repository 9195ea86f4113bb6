"""
Authorization errors.

Every error raised by the stores and the AuthManager derives from
AuthorizationError, so callers can catch the whole family at once.
The graph resolver never raises.
"""


class AuthorizationError(Exception):
    """Base class for authorization graph errors."""
    pass


class InvalidName(AuthorizationError):
    """Auth item name is empty or blank after trimming."""

    def __init__(self, name: object = None):
        self.name = name
        super().__init__(f"Invalid auth item name: {name!r}")


class DuplicateName(AuthorizationError):
    """An auth item with this name already exists."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Cannot add '{name}' because AuthItem already exists")


class NotFound(AuthorizationError):
    """The auth item does not exist."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"AuthItem '{name}' not found")


class ItemInUse(AuthorizationError):
    """Delete rejected because a user is directly assigned the item."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"AuthItem '{name}' is in use")


class CycleDetected(AuthorizationError):
    """Adding the child edge would make a role contain itself."""

    def __init__(self, parent: str, child: str):
        self.parent = parent
        self.child = child
        super().__init__(f"Adding '{child}' to '{parent}' would create a cycle")


class MissingRequiredParam(AuthorizationError):
    """A required batch argument is empty or absent."""

    param: str = ""

    def __init__(self, param: str | None = None):
        if param:
            self.param = param
        super().__init__(f"Missing '{self.param}' param")


class MissingUsersParam(MissingRequiredParam):
    param = "users"


class MissingRolesParam(MissingRequiredParam):
    param = "roles"


class NotARole(AuthorizationError):
    """Only roles may carry child items."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"AuthItem '{name}' is not a role and cannot have children")
