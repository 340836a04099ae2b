from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

import httpx

from core.config import settings
from domain.models import DraftSubmission, StatementType, UploadedFile
from domain.value_objects import FieldError, Notice
from services.backend.base import DataStore
from services.extratos.competence import format_competence
from services.extratos.errors import ExtratosError, UnknownError, ValidationError
from services.extratos.packaging import build_payload
from services.extratos.reference import load_clients, load_institutions
from services.extratos.transport import post_submission
from services.extratos.validation import can_submit, competence_error, validate_draft

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Formulário enviado com sucesso."
BUSY_MESSAGE = "Envio em andamento."


class FormState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    INVALID = "invalid"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    BUSY = "busy"


@dataclass
class SubmissionResult:
    ok: bool
    outcome: FormState
    message: str
    body: str | None = None
    errors: dict[str, FieldError] = field(default_factory=dict)


class ExtratosForm:
    """Draft holder + submit pipeline for the statement upload form.

    Flow per attempt:
        Idle -> Validating -> (Invalid -> Idle)
                           -> Submitting -> (Succeeded -> Idle, draft reset)
                                         -> (Failed -> Idle, draft kept)
    """

    def __init__(
        self,
        store: DataStore,
        notify: Callable[[Notice], None],
        webhook_url: str | None = None,
        http_client: httpx.Client | None = None,
    ):
        self.store = store
        self.notify = notify
        self.webhook_url = webhook_url or settings.WEBHOOK_URL
        self.http_client = http_client

        self.draft = DraftSubmission()
        self.errors: dict[str, FieldError] = {}
        self.clients: list[str] = []
        self.institutions: list[str] = []
        self.loading = False
        self.is_submitting = False
        self.state = FormState.IDLE

    # --- reference data ---

    def load_reference_data(self) -> None:
        self.loading = True
        try:
            self.clients = load_clients(self.store, self.notify)
            self.institutions = load_institutions(self.store, self.notify)
        finally:
            self.loading = False

    # --- edits ---

    def set_files(self, files: list[UploadedFile] | None) -> None:
        self.draft.files = list(files or [])

    def set_client(self, client: str) -> None:
        self.draft.client = client or ""

    def set_institution(self, institution: str) -> None:
        self.draft.institution = institution or ""

    def toggle_statement_type(self, kind: StatementType | str, checked: bool) -> None:
        kind = StatementType(kind)
        selected = [t for t in self.draft.statement_types if t != kind]
        if checked:
            selected.append(kind)
        self.draft.statement_types = selected

    def set_competence(self, raw: str) -> str:
        """Stores (and returns) the formatted value; called on every keystroke."""
        self.draft.competence = format_competence(raw)
        return self.draft.competence

    @property
    def competence_error(self) -> FieldError | None:
        return competence_error(self.draft.competence)

    def reset(self) -> None:
        self.draft = DraftSubmission()
        self.errors = {}

    # --- submit ---

    def validate(self) -> bool:
        self.errors = validate_draft(self.draft)
        return can_submit(self.errors)

    def submit(self) -> SubmissionResult:
        if self.is_submitting:
            return SubmissionResult(False, FormState.BUSY, BUSY_MESSAGE)

        self.is_submitting = True
        try:
            self.state = FormState.VALIDATING
            if not self.validate():
                self.state = FormState.INVALID
                logger.info("submit blocked: %s", sorted(self.errors))
                err = ValidationError(self.errors)
                return SubmissionResult(False, FormState.INVALID, err.message, errors=dict(self.errors))

            self.state = FormState.SUBMITTING
            try:
                body = post_submission(build_payload(self.draft), self.webhook_url, self.http_client)
            except ExtratosError as e:
                return self._failed(e)
            except Exception as e:  # noqa: BLE001
                logger.exception("unexpected submit failure")
                return self._failed(UnknownError(str(e) or None))

            self.state = FormState.SUCCEEDED
            self.reset()
            self.notify(Notice("success", "Sucesso!", SUCCESS_MESSAGE))
            return SubmissionResult(True, FormState.SUCCEEDED, SUCCESS_MESSAGE, body=body)
        finally:
            self.is_submitting = False
            self.state = FormState.IDLE

    def _failed(self, err: ExtratosError) -> SubmissionResult:
        self.state = FormState.FAILED
        self.notify(Notice("error", "Erro", err.message))
        return SubmissionResult(False, FormState.FAILED, err.message)
