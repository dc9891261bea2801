"""Consult-user exceptions.

These exception types let the server layer report failures consistently
without scraping strings. Snooze and cancellation are outcomes, not errors.
"""

from __future__ import annotations


class ConsultError(RuntimeError):
    """Base class for consult-user errors."""


class ValidationError(ConsultError):
    """Malformed or rule-violating request, raised before any dialog opens."""


class ResolveError(ConsultError):
    """A tweak parameter could not be located in its source file."""


class DialogTimeout(ConsultError):
    """No answer arrived before the dialog deadline."""

    def __init__(self, timeout_s: float):
        self.timeout_s = float(timeout_s)
        super().__init__(self.__str__())

    def __str__(self) -> str:
        return f"Dialog timed out after {self.timeout_s:g}s"


class ProviderError(ConsultError):
    """Base class for dialog executable failures."""

    def __init__(self, message: str, *, label: str = "Dialog CLI", command: str | None = None):
        self.message = message
        self.label = label
        self.command = command
        super().__init__(self.__str__())

    def __str__(self) -> str:
        if self.command:
            return f"{self.label} '{self.command}' {self.message}"
        return f"{self.label} {self.message}"


class ProviderNotFoundError(ProviderError):
    """The dialog executable is not installed where we expect it."""

    def __init__(self, path: str, *, label: str = "Dialog CLI", hint: str | None = None):
        self.path = path
        self.hint = hint
        message = f"not found at: {path}"
        if hint:
            message = f"{message}\n\n{hint}"
        super().__init__(message, label=label)


class ProviderExitError(ProviderError):
    def __init__(self, returncode: int, *, stderr: str = "", label: str = "Dialog CLI", command: str | None = None):
        self.returncode = int(returncode)
        self.stderr = (stderr or "").strip()
        message = f"exited with code {self.returncode}"
        if self.stderr:
            message = f"{message}: {self.stderr}"
        super().__init__(message, label=label, command=command)


class ProviderSignalError(ProviderError):
    def __init__(self, signal_name: str, *, label: str = "Dialog CLI", command: str | None = None):
        self.signal_name = signal_name
        super().__init__(f"killed by signal {signal_name}", label=label, command=command)


class ProviderOutputError(ProviderError):
    """Output that is not exactly one JSON object line."""

    def __init__(self, reason: str, *, output: str = "", label: str = "Dialog CLI", command: str | None = None):
        self.reason = reason
        self.output_preview = (output or "")[:200]
        super().__init__(f"returned {reason}: {self.output_preview}", label=label, command=command)
