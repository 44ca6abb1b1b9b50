"""
Exception classes with built-in guidance for the bookstore API test suite.

Only transport failures escape a client call; every HTTP status is a
captured result. Deserialization failures are assertion failures so that
they are attributed to the scenario that asked for typed access.
"""
import sys


class BookstoreException(Exception):
    """Base exception for all suite errors."""
    def __init__(self, message: str, error_type: str = None):
        super().__init__(message)
        self.error_type = error_type
        self.guidance = self._generate_guidance()

    def _get_current_command(self):
        """Get the current command being executed."""
        if len(sys.argv) > 0:
            executable = sys.argv[0].split('/')[-1]
            args = sys.argv[1:]
            if args:
                return f"{executable} {' '.join(args)}"
            return executable
        return "unknown command"

    def _generate_guidance(self):
        """Override in subclasses to provide specific guidance."""
        return f"""
❌ Error: {self}
💡 Check the suite configuration and try again
"""


class ConfigException(BookstoreException):
    """Raised when suite configuration (mode, group, threads) is invalid."""
    def __init__(self, message: str, setting_name: str = None, value=None):
        self.setting_name = setting_name
        self.value = value
        super().__init__(message, error_type="config")

    def _generate_guidance(self):
        command = self._get_current_command()
        return f"""
❌ Configuration error: {self}
💡 Setting '{self.setting_name or 'unknown'}' has invalid value {self.value!r}
   Run: {command} --help
"""


class TransportError(BookstoreException):
    """Raised when no response could be captured (DNS, refused connection, TLS).

    This is an infrastructure failure, not a domain assertion failure: a 4xx
    or 5xx response is never reported through this class.
    """
    def __init__(self, method: str, url: str, cause: Exception = None):
        self.method = method
        self.url = url
        self.cause = cause
        reason = f"{type(cause).__name__}: {cause}" if cause else "unknown transport error"
        super().__init__(f"{method} {url} failed before a response was received ({reason})",
                         error_type="transport")

    def _generate_guidance(self):
        return f"""
❌ Transport failure: {self}
💡 The bookstore service could not be reached. Resolve this in one of the following ways:
   1. Check network access to the base URL: {self.url}
   2. Override the target: export TEST_API_URL=https://your-host
   3. Run offline against the in-process service: export TEST_API_MODE=IN_MEMORY
"""


class DeserializationError(BookstoreException, AssertionError):
    """Raised when a response body does not parse into the requested shape."""
    def __init__(self, target_type: str, detail: str, body: str = None):
        self.target_type = target_type
        self.detail = detail
        self.body = body
        super().__init__(f"Response deserialization to {target_type} failed: {detail}",
                         error_type="deserialization")

    def _generate_guidance(self):
        preview = (self.body or '')[:200]
        return f"""
❌ Could not read response as {self.target_type}: {self.detail}
💡 Response body starts with: {preview!r}
"""
