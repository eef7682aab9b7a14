"""Exceptions for the URL shortener service layer.

This module contains the exception hierarchy for the service layer,
providing domain-specific exceptions that abstract underlying implementation details.
"""


class ServiceError(Exception):
    """Base exception for all service-level errors."""
    pass


class URLError(ServiceError):
    """Base exception for URL-related errors."""
    pass


class InvalidURLError(URLError):
    """The URL is missing, malformed, or its host does not resolve."""
    pass


class URLNotFoundError(URLError):
    """No URL is stored under the requested short id."""
    pass


class URLProcessingError(URLError):
    """The record store failed while handling the request."""
    pass
