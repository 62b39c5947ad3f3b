"""
Domain exceptions.

Domain exceptions represent business rule violations
and domain-specific error conditions.

Every exception belongs to exactly one category (NotFound, InvalidState,
Forbidden, AuthFailure, LimitExceeded, Internal). The API layer maps the
category to an HTTP status; the ``code`` is the machine-readable identifier
returned to clients.
"""


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    default_message = "An error occurred"
    default_code = "domain_error"

    def __init__(self, message: str = None, code: str = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
        """
        message = message or self.default_message
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code


# Categories


class NotFoundError(DomainException):
    """Base exception for missing resources."""

    default_message = "Resource not found"
    default_code = "not_found"


class InvalidStateError(DomainException):
    """Base exception for operations invalid in the current state."""

    default_message = "Operation not allowed in the current state"
    default_code = "invalid_state"


class ForbiddenError(DomainException):
    """Base exception for operations the caller is not entitled to."""

    default_message = "Forbidden"
    default_code = "forbidden"


class AuthFailureError(DomainException):
    """Base exception for failed authentication of a token or credential."""

    default_message = "Authentication failed"
    default_code = "auth_failure"


class LimitExceededError(DomainException):
    """Base exception for exhausted quotas."""

    default_message = "Limit exceeded"
    default_code = "limit_exceeded"


class InternalError(DomainException):
    """Base exception for failures of the service itself."""

    default_message = "An internal error occurred"
    default_code = "internal_error"


# NotFound


class LicenseNotFoundError(NotFoundError):
    """Raised when a license is not found."""

    default_message = "License not found"
    default_code = "license_not_found"


class HostedAppNotFoundError(NotFoundError):
    """Raised when a hosted application is not found."""

    default_message = "The requested application does not exist"
    default_code = "app_not_found"


class DownloadTokenNotFoundError(NotFoundError):
    """Raised when a download token has no matching record."""

    default_message = "Download token not found"
    default_code = "download_token_not_found"


# InvalidState


class LicenseNotIssuedError(InvalidStateError):
    """Raised when a license has not been issued to an application."""

    default_message = "This license has not been issued to any application"
    default_code = "license_not_issued"


class LicenseAlreadyDeactivatedError(InvalidStateError):
    """Raised when deactivating a license that is already deactivated."""

    default_message = "License is already deactivated"
    default_code = "license_already_deactivated"


class LicenseNotPersistedError(InvalidStateError):
    """Raised when an operation needs a saved license but it has no id."""

    default_message = "License must be saved before this operation"
    default_code = "license_not_persisted"


# Forbidden


class LicenseExpiredError(ForbiddenError):
    """Raised when a license has expired."""

    default_message = "License has expired"
    default_code = "license_expired"


class LicenseSuspendedError(ForbiddenError):
    """Raised when a license is suspended."""

    default_message = "License is suspended"
    default_code = "license_suspended"


class LicenseRevokedError(ForbiddenError):
    """Raised when a license has been revoked."""

    default_message = "License has been revoked"
    default_code = "license_revoked"


class LicenseDeactivatedError(ForbiddenError):
    """Raised when a license has been deactivated."""

    default_message = "License has been deactivated"
    default_code = "license_deactivated"


class AppMismatchError(ForbiddenError):
    """Raised when a license or token is bound to a different application."""

    default_message = "License is not valid for this application"
    default_code = "app_mismatch"


class DownloadTokenExpiredError(ForbiddenError):
    """Raised when a download token has expired."""

    default_message = "Download token has expired"
    default_code = "download_token_expired"


# AuthFailure


class MalformedTokenError(AuthFailureError):
    """Raised when a download token cannot be decoded."""

    default_message = "Download token is malformed"
    default_code = "malformed_token"


class InvalidTokenSignatureError(AuthFailureError):
    """Raised when a download token signature does not verify."""

    default_message = "Download token signature is invalid"
    default_code = "invalid_token_signature"


class InvalidTokenPayloadError(AuthFailureError):
    """Raised when a signed download token carries an unusable payload."""

    default_message = "Download token payload is invalid"
    default_code = "invalid_token_payload"


class DownloadTokenMissingError(AuthFailureError):
    """Raised when a download token is required but was not supplied."""

    default_message = "Download token is required"
    default_code = "missing_download_token"


class SiteTokenMissingError(AuthFailureError):
    """Raised when a host has no activation record on the license."""

    default_message = "This site has not been activated for the license"
    default_code = "site_token_missing"


class AuthorizationHeaderNotFoundError(AuthFailureError):
    """Raised when no site credential was supplied."""

    default_message = "Authorization header not found"
    default_code = "authorization_header_not_found"


class InvalidTokenFormatError(AuthFailureError):
    """Raised when the site credential is not valid base64."""

    default_message = "Invalid token format"
    default_code = "invalid_token_format"


class AuthorizationFailedError(AuthFailureError):
    """Raised when the site credential does not match the stored hash."""

    default_message = "Authorization failed"
    default_code = "authorization_failed"


# LimitExceeded


class DomainLimitReachedError(LimitExceededError):
    """Raised when a license has no free domain slot."""

    default_message = "Maximum allowed domains has been reached"
    default_code = "max_domains_reached"


# Internal


class PersistenceError(InternalError):
    """Raised when the store rejects a write."""

    default_message = "Unable to persist changes"
    default_code = "persistence_failed"


class ConcurrentModificationError(InternalError):
    """Raised when a conditional write finds a newer version in the store."""

    default_message = "The record was modified by another request"
    default_code = "concurrent_modification"


class LicenseKeyGenerationError(InternalError):
    """Raised when no unique license key could be generated."""

    default_message = "Unable to generate a unique license key"
    default_code = "license_regeneration_failed"
