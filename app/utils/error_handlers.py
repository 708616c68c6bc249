from fastapi import Request, status

from app.utils.responses import ResponseBuilder

# Service error code -> (status code, message shown to the panel)
ERROR_STATUS_MAPPING = {
    # Task errors
    "TASK_NOT_FOUND": (status.HTTP_404_NOT_FOUND, "Task not found"),
    # Chat errors
    "CHAT_NOT_FOUND": (status.HTTP_404_NOT_FOUND, "Chat not found"),
    # Calendar errors
    "INVALID_DATE_STRING": (
        status.HTTP_400_BAD_REQUEST,
        "Date must be in D/M/YYYY format",
    ),
}


def handle_service_error(request: Request, error: Exception):
    """Centralized service error handler for all routers"""
    error_message = str(error)

    # Service errors are raised as "ERROR_CODE" or "ERROR_CODE: details"
    if ":" in error_message:
        error_code, details = (part.strip() for part in error_message.split(":", 1))
    else:
        error_code, details = error_message, ""

    if error_code not in ERROR_STATUS_MAPPING:
        return ResponseBuilder.error(
            request=request,
            message=error_message,
            error_code="SERVICE_ERROR",
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    status_code, message = ERROR_STATUS_MAPPING[error_code]
    return ResponseBuilder.error(
        request=request,
        message=f"{message}: {details}" if details else message,
        error_code=error_code,
        status_code=status_code,
    )
