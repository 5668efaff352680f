from crm.actions.executor import ActionExecutor
from crm.bootstrap import build_services
from crm.common.identity import dev_context
from crm.directives.models import CreateDocumentAction, CreateModelAction, UnrecognizedAction


class _Unused:
    def generate(self, contents):
        raise AssertionError("generator not expected")

    def generate_image(self, prompt):
        raise AssertionError("image generator not expected")

    def search(self, query):
        raise AssertionError("search not expected")


def _setup():
    stub = _Unused()
    services = build_services(generator=stub, image_generator=stub, video_search=stub)
    executor = ActionExecutor(design=services.design, records=services.records)
    return services, executor, dev_context()


def _deal_action(**overrides):
    payload = {
        "name": "Deal",
        "collection": "deal_records",
        "fields": [{"name": "title", "type": "string", "required": True}],
    }
    payload.update(overrides)
    return CreateModelAction.model_validate(payload)


def test_create_model_persists_and_annotates():
    services, executor, ctx = _setup()
    outcome = executor.execute(ctx, _deal_action())

    assert outcome.annotation == "\n✅ Created model Deal (deal_records)."
    assert outcome.result.to_payload() == {
        "type": "create_model",
        "ok": True,
        "name": "Deal",
        "collection": "deal_records",
    }
    model_def = services.design.find_active(ctx, "Deal")
    assert model_def.collection == "deal_records"
    assert model_def.tenant_id == ctx.tenant_id
    events = services.events.list_events(ctx)
    assert [(e.type, e.model) for e in events] == [("record.created", "ModelDef")]


def test_duplicate_create_model_reports_failure_without_second_event():
    services, executor, ctx = _setup()
    executor.execute(ctx, _deal_action())
    outcome = executor.execute(ctx, _deal_action())

    assert outcome.result.ok is False
    assert outcome.annotation.startswith("\n❌ Failed to create model: ")
    assert len(services.events.list_events(ctx)) == 1


def test_create_model_accepts_bare_field_names():
    services, executor, ctx = _setup()
    outcome = executor.execute(ctx, _deal_action(fields=["title", "amount"]))

    assert outcome.result.ok is True
    model_def = services.design.find_active(ctx, "Deal")
    assert model_def.field_defs == ["title", "amount"]
    assert model_def.required_fields() == []


def test_invalid_model_annotation_names_failing_fields():
    services, executor, ctx = _setup()
    outcome = executor.execute(ctx, _deal_action(collection=""))

    assert outcome.result.ok is False
    assert outcome.annotation == "\n❌ Failed to create model: Invalid model definition (collection)"
    assert services.design.find_active(ctx, "Deal") is None
    assert services.events.list_events(ctx) == []


def test_create_document_for_unknown_model_writes_nothing():
    services, executor, ctx = _setup()
    outcome = executor.execute(ctx, CreateDocumentAction(model="Ghost", data={"title": "x"}))

    assert outcome.annotation == "\n❌ Model Ghost not found."
    assert outcome.result.to_payload() == {
        "type": "create_document",
        "ok": False,
        "model": "Ghost",
        "error": "Model not found",
    }
    assert services.records.repo.collection_names() == []
    assert services.events.list_events(ctx) == []


def test_create_document_stamps_record_and_skips_required_check():
    services, executor, ctx = _setup()
    executor.execute(ctx, _deal_action())
    outcome = executor.execute(ctx, CreateDocumentAction(model="Deal", data={"amount": 5}))

    assert outcome.annotation == "\n✅ Created Deal record."
    assert outcome.result.ok is True
    rows = services.records.query_records(ctx, "Deal")
    assert len(rows) == 1
    assert rows[0]["amount"] == 5
    assert rows[0]["tenantId"] == ctx.tenant_id
    assert rows[0]["createdBy"] == ctx.user_id
    assert [e.model for e in services.events.list_events(ctx)] == ["Deal", "ModelDef"]


def test_unrecognized_actions():
    _, executor, ctx = _setup()

    known = executor.execute(
        ctx, UnrecognizedAction(intended="create_document", reason="model and data are required")
    )
    assert known.annotation == "\n❌ Failed to create record: model and data are required"
    assert known.result.ok is False

    unknown = executor.execute(ctx, UnrecognizedAction(reason="unsupported action type: drop"))
    assert unknown.result is None
    assert unknown.annotation == ""

    assert executor.execute(ctx, None).annotation == ""
