"""
Standard exit codes and error types for guilty.

Following Unix/POSIX conventions for command-line tools. Every engine error
derives from CommandError so the CLI can map it to an exit code and the
HTTP layer to a status code.
"""

# Standard POSIX exit codes
SUCCESS = 0              # Successful termination
GENERAL_ERROR = 1        # General errors
USAGE_ERROR = 2          # Misuse of shell command (wrong arguments, etc.)

# Application-specific exit codes (64-113 are typically available)
NOT_FOUND = 64           # Group, repository or path does not exist
STORE_ERROR = 65         # Repository store could not be read
CONFIG_ERROR = 66        # Configuration file error
PERMISSION_ERROR = 67    # Insufficient permissions
CONTENT_ERROR = 68       # Object content could not be read
LIFECYCLE_FAILURE = 69   # Create/delete failed part way
DATA_ERROR = 70          # Malformed path or invalid name
INTERRUPTED = 130        # Terminated by Ctrl+C (SIGINT)

# Exit code mappings for common exceptions
EXCEPTION_EXIT_CODES = {
    'FileNotFoundError': NOT_FOUND,
    'PermissionError': PERMISSION_ERROR,
    'ValueError': DATA_ERROR,
    'KeyError': DATA_ERROR,
    'JSONDecodeError': DATA_ERROR,
    'KeyboardInterrupt': INTERRUPTED,
}


def get_exit_code_for_exception(exc: Exception) -> int:
    """
    Get the appropriate exit code for an exception.

    Args:
        exc: The exception that occurred

    Returns:
        Appropriate exit code
    """
    if isinstance(exc, CommandError):
        return exc.exit_code
    exc_name = exc.__class__.__name__
    return EXCEPTION_EXIT_CODES.get(exc_name, GENERAL_ERROR)


class CommandError(Exception):
    """
    Exception that commands can raise to indicate specific exit codes.

    http_status is the status the JSON API answers with.
    """
    http_status = 500

    def __init__(self, message: str, exit_code: int = GENERAL_ERROR):
        super().__init__(message)
        self.exit_code = exit_code

    def to_dict(self):
        return {
            "error": str(self),
            "type": type(self).__name__,
            "exit_code": self.exit_code,
        }


class ConfigError(CommandError):
    """Raised when there's a configuration error."""
    def __init__(self, message: str):
        super().__init__(message, CONFIG_ERROR)


class MalformedPathError(CommandError):
    """Raised when an encoded path cannot be split or decoded."""
    http_status = 400

    def __init__(self, message: str = "Invalid repository path"):
        super().__init__(message, DATA_ERROR)


class PathEscapeError(CommandError):
    """Raised when a requested path resolves outside its repository or store."""
    http_status = 400

    def __init__(self, path: str):
        super().__init__(f"Invalid path: {path!r} is outside the repository", DATA_ERROR)
        self.path = path


class CatalogUnavailableError(CommandError):
    """Raised when the repository store root cannot be scanned."""
    http_status = 503

    def __init__(self, message: str):
        super().__init__(message, STORE_ERROR)


class NotFoundError(CommandError):
    """Base for missing groups, repositories and paths."""
    http_status = 404

    def __init__(self, message: str):
        super().__init__(message, NOT_FOUND)


class GroupNotFoundError(NotFoundError):
    def __init__(self, group: str):
        super().__init__(f"Group '{group}' does not exist")
        self.group = group


class RepositoryNotFoundError(NotFoundError):
    def __init__(self, group: str, name: str):
        super().__init__(f"Repository '{group}/{name}' does not exist")
        self.group = group
        self.name = name


class PathNotFoundError(NotFoundError):
    def __init__(self, path: str):
        super().__init__(f"Path '{path}' does not exist at HEAD")
        self.path = path


class NotInitializedError(CommandError):
    """Raised when a repository path exists but holds no recognized layout."""
    http_status = 400

    def __init__(self, path: str):
        super().__init__(f"Not a git repository: {path}", DATA_ERROR)
        self.path = path


class ContentUnavailableError(CommandError):
    """Raised when a blob or its attributes cannot be read."""
    http_status = 500

    def __init__(self, message: str):
        super().__init__(message, CONTENT_ERROR)


class ValidationError(CommandError):
    """Raised for invalid or colliding repository names."""
    http_status = 400

    def __init__(self, message: str):
        super().__init__(message, DATA_ERROR)


class LifecycleError(CommandError):
    """Raised when creating or quarantining a repository fails."""
    http_status = 500

    def __init__(self, message: str):
        super().__init__(message, LIFECYCLE_FAILURE)
