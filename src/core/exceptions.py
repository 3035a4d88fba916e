from fastapi import HTTPException, status


# Machine-readable codes sent next to "detail" in every error response
ERROR_CODES = {
    status.HTTP_400_BAD_REQUEST: "BAD_REQUEST",
    status.HTTP_401_UNAUTHORIZED: "UNAUTHORIZED",
    status.HTTP_403_FORBIDDEN: "FORBIDDEN",
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
    status.HTTP_405_METHOD_NOT_ALLOWED: "METHOD_NOT_ALLOWED",
    status.HTTP_409_CONFLICT: "CONFLICT",
    status.HTTP_422_UNPROCESSABLE_CONTENT: "VALIDATION_ERROR",
}


def error_code_for_status(status_code: int) -> str:
    return ERROR_CODES.get(status_code, "INTERNAL_ERROR" if status_code >= 500 else "ERROR")


class KanbanException(HTTPException):
    def __init__(
        self,
        status_code: int,
        detail: str,
        code: str | None = None,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.code = code or error_code_for_status(status_code)


class NotFoundException(KanbanException):
    # Used both for "doesn't exist" and "exists but belongs to someone else"
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ValidationException(KanbanException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_422_UNPROCESSABLE_CONTENT, detail=detail)


class ConflictException(KanbanException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class UnauthorizedException(KanbanException):
    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


AuthenticationFailedException = UnauthorizedException("Could not validate credentials")
InvalidCredentialsException = UnauthorizedException("Invalid email or password")
BadJWTException = UnauthorizedException("JWT malformed or missing")
ExpiredJWTException = UnauthorizedException("Authentication token has expired")

UserNotFound = NotFoundException("User not found")
BoardNotFound = NotFoundException("Board not found")
ColumnNotFound = NotFoundException("Column not found")
TargetColumnNotFound = NotFoundException("Target column not found")
TaskNotFound = NotFoundException("Task not found")
CommentNotFound = NotFoundException("Comment not found")

EmailAlreadyRegistered = ConflictException("User with this email already exists")
