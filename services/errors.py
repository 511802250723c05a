from enum import Enum


class ErrorKind(str, Enum):
    ENTITLEMENT_REQUIRED = "entitlement_required"
    PERMISSION_DENIED = "permission_denied"
    NETWORK_UNAVAILABLE = "network_unavailable"
    NOT_FOUND = "not_found"
    UNKNOWN = "unknown"


class BibleException(Exception):
    """Base error raised by the Bible services. Callers switch on ``kind``."""
    kind = ErrorKind.UNKNOWN

    def __init__(self, message, kind=None):
        super().__init__(message)
        self.message = message
        if kind is not None:
            self.kind = kind

    def __str__(self):
        return self.message


class EntitlementRequired(BibleException):
    kind = ErrorKind.ENTITLEMENT_REQUIRED

    def __init__(self, feature):
        super().__init__(f"Premium subscription required for {feature}")
        self.feature = feature


class PermissionDenied(BibleException):
    kind = ErrorKind.PERMISSION_DENIED


class NetworkUnavailable(BibleException):
    kind = ErrorKind.NETWORK_UNAVAILABLE


class NotFound(BibleException):
    kind = ErrorKind.NOT_FOUND


class LocalStorageError(BibleException):
    """The on-device store could not complete a read or write."""
