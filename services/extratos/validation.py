from __future__ import annotations

from domain.models import DraftSubmission
from domain.value_objects import FieldError
from services.extratos.competence import COMPETENCE_MAX_LEN, is_valid_competence

REQUIRED = "required"
INVALID_FORMAT = "invalid_format"

REQUIRED_MESSAGE = "Este campo é obrigatório"
REQUIRED_TYPES_MESSAGE = "Selecione pelo menos um tipo"
INVALID_COMPETENCE_MESSAGE = "Formato inválido. Use MM/AAAA"

# fields whose errors block the submit; competence is advisory only
BLOCKING_FIELDS = ("files", "client", "statement_types", "institution")


def competence_error(competence: str) -> FieldError | None:
    """Only flags a complete-looking value (7+ chars) that fails the MM/YYYY pattern."""
    if competence and len(competence) >= COMPETENCE_MAX_LEN and not is_valid_competence(competence):
        return FieldError(INVALID_FORMAT, INVALID_COMPETENCE_MESSAGE)
    return None


def validate_draft(draft: DraftSubmission) -> dict[str, FieldError]:
    """Run every rule and return the union of failures (never short-circuits)."""
    errors: dict[str, FieldError] = {}

    if not draft.files:
        errors["files"] = FieldError(REQUIRED, REQUIRED_MESSAGE)
    if not draft.client:
        errors["client"] = FieldError(REQUIRED, REQUIRED_MESSAGE)
    if not draft.statement_types:
        errors["statement_types"] = FieldError(REQUIRED, REQUIRED_TYPES_MESSAGE)
    if not draft.institution:
        errors["institution"] = FieldError(REQUIRED, REQUIRED_MESSAGE)

    comp = competence_error(draft.competence)
    if comp:
        errors["competence"] = comp

    return errors


def can_submit(errors: dict[str, FieldError]) -> bool:
    return not any(f in errors for f in BLOCKING_FIELDS)
