from decision_flow.context import build_context
from decision_flow.schemas import WorkflowRequest


def test_context_renders_fields_in_fixed_order(sample_request: WorkflowRequest) -> None:
    assert build_context(sample_request) == (
        "Business Goal: Launch support bot\n"
        "Industry: SaaS\n"
        "Budget: €100K\n"
        "Timeline: 6 months\n"
        "Constraints: small team"
    )


def test_context_accepts_empty_fields() -> None:
    context = build_context(WorkflowRequest())

    assert context.splitlines() == [
        "Business Goal: ",
        "Industry: ",
        "Budget: ",
        "Timeline: ",
        "Constraints: ",
    ]


def test_request_accepts_snake_case_names() -> None:
    request = WorkflowRequest(business_goal="Expand to Spain")
    assert build_context(request).startswith("Business Goal: Expand to Spain")
