import json

import httpx

from conftest import WEBHOOK, FakeStore, WebhookStub, fill, make_form
from domain.models import DraftSubmission, StatementType
from services.extratos.errors import CONNECTIVITY_MESSAGE
from services.extratos.form import BUSY_MESSAGE, SUCCESS_MESSAGE, ExtratosForm, FormState


def test_scenario_a_success_resets_draft(store, notices, pdf):
    stub = WebhookStub(httpx.Response(200, text="Workflow was started"))
    form = make_form(store, notices, stub)
    fill(form, pdf)

    result = form.submit()

    assert result.ok
    assert result.outcome == FormState.SUCCEEDED
    assert result.body == "Workflow was started"
    assert form.draft == DraftSubmission()
    assert form.errors == {}
    assert form.state == FormState.IDLE
    assert not form.is_submitting
    assert notices.last.level == "success"
    assert notices.last.description == SUCCESS_MESSAGE

    (req,) = stub.requests
    assert str(req.url) == WEBHOOK
    assert b"Acme" in req.content
    assert json.dumps(["Performance"]).encode() in req.content

    assert "submissions" not in store.tables


def test_scenario_b_missing_files_blocks_without_network(store, notices, pdf):
    stub = WebhookStub()
    form = make_form(store, notices, stub)
    fill(form, pdf)
    form.set_files([])

    result = form.submit()

    assert not result.ok
    assert result.outcome == FormState.INVALID
    assert form.errors["files"].code == "required"
    assert set(form.errors) == {"files"}
    assert stub.requests == []
    assert notices.notices == []
    assert "submissions" not in store.tables


def test_scenario_c_http_500_keeps_draft(store, notices, pdf):
    stub = WebhookStub(httpx.Response(500, text="Internal Error"))
    form = make_form(store, notices, stub)
    fill(form, pdf)
    before = form.draft.model_copy(deep=True)

    result = form.submit()

    assert not result.ok
    assert result.outcome == FormState.FAILED
    assert form.draft == before
    assert notices.last.level == "error"
    assert "500" in notices.last.description
    assert "submissions" not in store.tables
    assert not form.is_submitting


def test_scenario_d_offline_shows_generic_message(store, notices, pdf):
    stub = WebhookStub(exc=httpx.ConnectError("[Errno -3] Temporary failure in name resolution"))
    form = make_form(store, notices, stub)
    fill(form, pdf)

    form.submit()

    assert notices.last.description == CONNECTIVITY_MESSAGE
    assert "Errno" not in notices.last.description
    assert form.draft.client == "Acme"


def test_scenario_e_competence_is_formatted_per_keystroke(store, notices):
    form = make_form(store, notices, WebhookStub())
    shown = []
    value = ""
    for key in "123":
        value = form.set_competence(value + key)
        shown.append(value)
    assert shown == ["1", "12", "12/3"]
    assert form.draft.competence == "12/3"


def test_bad_competence_does_not_block_submit(store, notices, pdf):
    stub = WebhookStub()
    form = make_form(store, notices, stub)
    fill(form, pdf)
    form.set_competence("13/2024")
    assert form.competence_error is not None

    result = form.submit()

    assert result.ok
    assert len(stub.requests) == 1


def test_in_flight_guard_rejects_reentry(store, notices, pdf):
    nested = []

    def handler(request):
        nested.append(form.submit())
        return httpx.Response(200, text="ok")

    form = ExtratosForm(
        store,
        notices,
        webhook_url=WEBHOOK,
        http_client=httpx.Client(transport=httpx.MockTransport(handler)),
    )
    fill(form, pdf)

    result = form.submit()

    assert result.ok
    assert [r.outcome for r in nested] == [FormState.BUSY]
    assert nested[0].message == BUSY_MESSAGE
    assert not form.is_submitting


def test_guard_released_after_unexpected_error(store, notices, pdf):
    form = make_form(store, notices, WebhookStub(exc=RuntimeError("boom")))
    fill(form, pdf)

    result = form.submit()

    assert result.message == "boom"
    assert not form.is_submitting
    assert form.state == FormState.IDLE


def test_submit_only_talks_to_the_webhook(store, notices, pdf):
    store.fail.update({"insert_record", "update_record", "delete_record"})
    form = make_form(store, notices, WebhookStub())
    fill(form, pdf)

    result = form.submit()

    assert result.ok
    assert [n.level for n in notices.notices] == ["success"]
    assert "submissions" not in store.tables


def test_toggle_keeps_selection_order_without_duplicates(store, notices):
    form = make_form(store, notices, WebhookStub())
    form.toggle_statement_type(StatementType.PERFORMANCE, True)
    form.toggle_statement_type("Batedor", True)
    form.toggle_statement_type(StatementType.PERFORMANCE, True)
    assert form.draft.statement_types == [StatementType.BATEDOR, StatementType.PERFORMANCE]
    form.toggle_statement_type(StatementType.BATEDOR, False)
    assert form.draft.statement_types == [StatementType.PERFORMANCE]


def test_load_reference_data(store, notices):
    form = make_form(store, notices, WebhookStub())
    form.load_reference_data()
    assert form.clients == ["Acme", "Beta"]
    assert form.institutions == ["BTG", "XP"]
    assert not form.loading


def test_load_reference_data_degrades_to_empty(notices):
    store = FakeStore()
    store.fail.update({"call_rpc", "list_records"})
    form = make_form(store, notices, WebhookStub())

    form.load_reference_data()

    assert form.clients == [] and form.institutions == []
    assert not form.loading
    assert [n.level for n in notices.notices] == ["error", "error"]
    assert notices.notices[0].description == "Erro ao carregar clientes."
