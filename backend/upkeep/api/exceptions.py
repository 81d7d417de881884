"""Standard HTTP exceptions for common cases."""
from fastapi import HTTPException, status


def not_found(resource: str = "Resource", name: str | None = None) -> HTTPException:
    """
    Return 404 Not Found exception.

    Args:
        resource: Name of the resource that wasn't found
        name: Optional name of the resource

    Returns:
        HTTPException with 404 status code

    Examples:
        raise not_found("Task", "Cleanup Tokens")  # 'Task "Cleanup Tokens" not found'
        raise not_found("Task")                    # "Task not found"
    """
    detail = f"{resource} not found"
    if name:
        detail = f'{resource} "{name}" not found'
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=detail
    )


def unauthorized(message: str = "Not authenticated") -> HTTPException:
    """
    Return 401 Unauthorized exception.

    Args:
        message: Custom error message

    Returns:
        HTTPException with 401 status code
    """
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=message,
        headers={"WWW-Authenticate": "Bearer"},
    )


def server_error(message: str = "Internal server error") -> HTTPException:
    """
    Return 500 Internal Server Error exception.

    Args:
        message: Error message describing what went wrong

    Returns:
        HTTPException with 500 status code

    Examples:
        raise server_error("Failed to update task")
    """
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=message
    )


def service_unavailable(message: str = "Service unavailable") -> HTTPException:
    """
    Return 503 Service Unavailable exception.

    Args:
        message: Error message describing what is unavailable

    Returns:
        HTTPException with 503 status code
    """
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=message
    )
