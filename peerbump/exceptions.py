"""
Custom exception hierarchy for peerbump.

All exceptions inherit from :class:`PeerBumpError` and carry optional
structured metadata in ``details`` so that the CLI can report a concise
message while debug logging keeps the full context.
"""

from __future__ import annotations

from typing import Any, Mapping, MutableMapping, Optional, Sequence


class PeerBumpError(Exception):
    """Base exception for all peerbump errors.

    Args:
        message: Human-readable error message.
        details: Optional structured metadata describing the error.
    """

    __slots__ = ("message", "details")

    def __init__(
        self,
        message: str,
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.message: str = message
        self.details: MutableMapping[str, Any] = dict(details) if details else {}
        super().__init__(message)

    def __str__(self) -> str:
        if not self.details:
            return self.message
        formatted = ", ".join(f"{k}={v}" for k, v in self.details.items())
        return f"{self.message} ({formatted})"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, details={dict(self.details)!r})"
        )


def _add_if(details: MutableMapping[str, Any], key: str, value: Any) -> None:
    """Add a key to ``details`` only if ``value`` is not ``None``."""
    if value is not None:
        details[key] = value


def _truncate(text: str, max_length: int = 200) -> str:
    """Truncate long text for safe logging or error reporting."""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


# ---------------------------------------------------------------------------
# Graph and resolution errors
# ---------------------------------------------------------------------------


class ConsistencyError(PeerBumpError):
    """Raised when an invariant of the dependency graph is violated.

    This always indicates a defect (or inconsistent registry data), never
    a user error, and aborts the run.

    Args:
        message: Error description.
        package_name: Package whose record is inconsistent.
        section: Manifest section being processed.
    """

    __slots__ = ("package_name", "section")

    def __init__(
        self,
        message: str,
        *,
        package_name: Optional[str] = None,
        section: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "package", package_name)
        _add_if(details, "section", section)

        super().__init__(message, details)

        self.package_name = package_name
        self.section = section


class CyclicDependencyError(ConsistencyError):
    """Raised when the peer-dependency relation contains a cycle.

    Args:
        cycle: Package names along the cycle; the first name is repeated
            at the end.
        section: Manifest section being processed.
    """

    __slots__ = ("cycle",)

    def __init__(
        self,
        cycle: Sequence[str],
        *,
        section: Optional[str] = None,
    ) -> None:
        path = " -> ".join(cycle)
        super().__init__(
            f"Peer dependencies form a cycle: {path}",
            package_name=cycle[0] if cycle else None,
            section=section,
        )
        self.cycle = list(cycle)


class ResolutionError(PeerBumpError):
    """Raised when candidate resolution cannot complete.

    Args:
        message: Error description.
        package_name: Package being resolved when the failure occurred.
        candidate: Candidate version at the time of failure.
    """

    __slots__ = ("package_name", "candidate")

    def __init__(
        self,
        message: str,
        *,
        package_name: Optional[str] = None,
        candidate: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "package", package_name)
        _add_if(details, "candidate", candidate)

        super().__init__(message, details)

        self.package_name = package_name
        self.candidate = candidate


class NoCandidateError(ResolutionError):
    """Raised when backtracking has no older version left to try."""


# ---------------------------------------------------------------------------
# External collaborator errors
# ---------------------------------------------------------------------------


class NetworkError(PeerBumpError):
    """Raised when HTTP or network operations fail.

    Args:
        message: Error description.
        url: URL being accessed.
        status_code: HTTP status code, if available.
        response_body: Raw response body, truncated for safety.
    """

    __slots__ = ("url", "status_code", "response_body")

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "url", url)
        _add_if(details, "status_code", status_code)

        if response_body is not None:
            details["response"] = _truncate(response_body)

        super().__init__(message, details)

        self.url = url
        self.status_code = status_code
        self.response_body = response_body


class RegistryError(NetworkError):
    """Raised for missing or malformed npm registry metadata.

    Args:
        message: Error description.
        package_name: Name (or ``name@version``) of the package involved.
        **kwargs: Additional arguments forwarded to ``NetworkError``.
    """

    __slots__ = ("package_name",)

    def __init__(
        self,
        message: str,
        *,
        package_name: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)

        self.package_name = package_name
        if package_name is not None:
            self.details["package"] = package_name


class ManifestError(PeerBumpError):
    """Raised when ``package.json`` content is invalid.

    Args:
        message: Error description.
        file_path: Path to the manifest.
        section: Dependency section involved.
    """

    __slots__ = ("file_path", "section")

    def __init__(
        self,
        message: str,
        *,
        file_path: Optional[str] = None,
        section: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "file", file_path)
        _add_if(details, "section", section)

        super().__init__(message, details)

        self.file_path = file_path
        self.section = section


class NotFoundError(ManifestError):
    """Raised when a package is declared in no dependency section.

    Args:
        package_name: The package that could not be located.
        file_path: Path to the manifest.
    """

    __slots__ = ("package_name",)

    def __init__(
        self,
        package_name: str,
        *,
        file_path: Optional[str] = None,
    ) -> None:
        super().__init__(
            f"Package {package_name} was not found in the manifest",
            file_path=file_path,
        )
        self.package_name = package_name
        self.details["package"] = package_name


class FileOperationError(PeerBumpError):
    """Raised when file system operations fail.

    Args:
        message: Error description.
        file_path: Path to the file involved.
        operation: Operation being performed (read/write).
        original_error: Original exception that triggered this error.
    """

    __slots__ = ("file_path", "operation", "original_error")

    def __init__(
        self,
        message: str,
        *,
        file_path: Optional[str] = None,
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", file_path)
        _add_if(details, "operation", operation)
        _add_if(
            details,
            "original_error",
            str(original_error) if original_error else None,
        )

        super().__init__(message, details)

        self.file_path = file_path
        self.operation = operation
        self.original_error = original_error


class GitError(PeerBumpError):
    """Raised when a git command exits with a non-zero status.

    Args:
        message: Error description.
        command: The git arguments that were run.
        returncode: Process exit status.
        stderr: Captured standard error, truncated for safety.
    """

    __slots__ = ("command", "returncode", "stderr")

    def __init__(
        self,
        message: str,
        *,
        command: Optional[Sequence[str]] = None,
        returncode: Optional[int] = None,
        stderr: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "command", " ".join(command) if command else None)
        _add_if(details, "returncode", returncode)
        if stderr:
            details["stderr"] = _truncate(stderr.strip())

        super().__init__(message, details)

        self.command = list(command) if command else None
        self.returncode = returncode
        self.stderr = stderr


class ConfigError(PeerBumpError):
    """Raised when the configuration file is unreadable or invalid.

    Args:
        message: Error description.
        config_path: Path to the configuration file.
        option: Offending option, if any.
    """

    __slots__ = ("config_path", "option")

    def __init__(
        self,
        message: str,
        *,
        config_path: Optional[str] = None,
        option: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", config_path)
        _add_if(details, "option", option)

        super().__init__(message, details)

        self.config_path = config_path
        self.option = option
