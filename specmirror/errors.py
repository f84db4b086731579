"""Error handling framework for specmirror."""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Dict, Any, Optional


class ErrorCategory(Enum):
    """Categories of errors for structured error handling."""
    FILESYSTEM = "filesystem"
    PROCESS = "process"
    CLONE = "clone"
    UPDATE = "update"
    CONFIGURATION = "configuration"


class SetupError(Exception):
    """Base class for every failure that aborts a mirror setup."""

    category = ErrorCategory.CONFIGURATION
    error_code = "SETUP_ERROR"

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}


class MigrationError(SetupError):
    """A legacy entry could not be moved or the storage root could not be created."""

    category = ErrorCategory.FILESYSTEM
    error_code = "MIGRATION_FAILED"


class GitProcessError(SetupError):
    """A git invocation exited with a non-zero status."""

    category = ErrorCategory.PROCESS
    error_code = "GIT_PROCESS_FAILED"

    def __init__(self, command: list, returncode: int, stdout: str = "", stderr: str = ""):
        self.command = list(command)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        output = (stderr or stdout or "").strip()
        message = f"`{' '.join(self.command)}` exited with status {returncode}"
        if output:
            message = f"{message}:\n{output}"
        super().__init__(message, context={'command': self.command, 'returncode': returncode})


class CloneError(SetupError):
    """The mirror could not be cloned from the remote."""

    category = ErrorCategory.CLONE
    error_code = "CLONE_FAILED"


class UpdateError(SetupError):
    """The mirror could not be brought up to date with the remote."""

    category = ErrorCategory.UPDATE
    error_code = "UPDATE_FAILED"


@dataclass
class ErrorResponse:
    """Standardized error response format for setup operations."""
    error: str
    error_code: str
    message: str
    timestamp: str
    category: str
    context: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert error response to dictionary format."""
        result = {
            "error": self.error,
            "error_code": self.error_code,
            "message": self.message,
            "timestamp": self.timestamp,
            "category": self.category
        }
        if self.context:
            result["context"] = self.context
        return result


class ErrorHandler:
    """Turns setup failures into structured responses."""

    def __init__(self):
        self.logger = logging.getLogger('specmirror.error_handler')

    def handle_setup_error(self, error: Exception, context: Dict[str, Any] = None) -> ErrorResponse:
        """Handle an error raised while setting up the mirror."""
        context = dict(context or {})

        if isinstance(error, SetupError):
            error_code = error.error_code
            category = error.category.value
            message = error.message
            context.update(error.context)
        elif isinstance(error, ValueError):
            error_code = "CONFIGURATION_INVALID"
            category = ErrorCategory.CONFIGURATION.value
            message = str(error)
        else:
            error_code = "SETUP_GENERAL_ERROR"
            category = ErrorCategory.FILESYSTEM.value if isinstance(error, OSError) else "system"
            message = f"Setup failed: {error}"

        error_response = ErrorResponse(
            error="Mirror setup failed",
            error_code=error_code,
            message=message,
            timestamp=datetime.now().isoformat(),
            category=category,
            context=context
        )

        self.logger.error(
            f"Setup error: {message}",
            extra={
                'operation': 'setup_error',
                'error_code': error_code,
            }
        )

        return error_response


error_handler = ErrorHandler()
