from __future__ import annotations

CONNECTIVITY_MESSAGE = (
    "Erro de conectividade. Verifique sua conexão com a internet ou tente novamente."
)
GENERIC_SUBMIT_MESSAGE = "Erro ao enviar formulário. Tente novamente."


class ExtratosError(Exception):
    """Base for every error surfaced by the submission pipeline."""

    default_message = GENERIC_SUBMIT_MESSAGE

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self.args[0])


class ValidationError(ExtratosError):
    """Field-scoped; blocks submission until the user fixes the draft."""

    def __init__(self, errors: dict):
        self.errors = errors
        super().__init__("Verifique os campos obrigatórios.")


class ReferenceLoadError(ExtratosError):
    default_message = "Erro ao carregar dados de referência."


class TransportError(ExtratosError):
    """The webhook answered with a non-2xx status."""

    def __init__(self, status_code: int, reason: str = ""):
        self.status_code = status_code
        self.reason = reason
        super().__init__(f"Erro HTTP: {status_code} - {reason}")


class ConnectivityError(ExtratosError):
    """No response was received (DNS, TLS, offline, timeout)."""

    default_message = CONNECTIVITY_MESSAGE


class UnknownError(ExtratosError):
    pass
