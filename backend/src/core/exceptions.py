"""
Custom Exception Hierarchy
Domain and application-level exceptions
"""


class DomainException(Exception):
    """Base exception for all domain errors"""
    pass


class AuthenticationException(DomainException):
    """Authentication failed"""
    pass


class AuthorizationException(DomainException):
    """User not authorized for this operation"""
    pass


class ValidationException(DomainException):
    """Input could not be accepted (bad format, bad identifier, unsupported file)"""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(message)


class RepositoryException(DomainException):
    """Database operation failed"""
    pass


class ResourceNotFoundException(DomainException):
    """Requested resource not found"""

    def __init__(self, resource_type: str, identifier: str):
        self.resource_type = resource_type
        self.identifier = identifier
        super().__init__(f"{resource_type} not found: {identifier}")


class InvalidStateTransitionException(DomainException):
    """Lifecycle mutation not allowed from the current status"""

    def __init__(self, request_id: str, current_status: str, target_status: str):
        self.request_id = request_id
        self.current_status = current_status
        self.target_status = target_status
        super().__init__(
            f"Resume request {request_id} cannot move from '{current_status}' to '{target_status}'"
        )


class VersionConflictException(DomainException):
    """Version operation conflicts with the active-version pointer"""
    pass


class ConversionException(DomainException):
    """Document could not be converted to PDF"""
    pass


class UploadBrokerException(DomainException):
    """Presigned upload location could not be obtained"""
    pass


class UploadException(DomainException):
    """Raw upload to the presigned location failed"""
    pass


class ExtractionFailedException(DomainException):
    """External extraction pipeline reported a failure"""
    pass


class IdentityProviderException(DomainException):
    """Signing keys could not be retrieved from the identity provider"""
    pass
