"""
事件批次校验测试
"""

import pytest
from hypothesis import given, strategies as st

from ghostroute.config.seed import SEED_EVENTS
from ghostroute.errors import ValidationError
from ghostroute.services.validator import MAX_INT, REQUIRED_FIELDS, EventValidator, validate_events
from tests.conftest import make_event


def kinds(report):
    return [v.kind for v in report.violations]


class TestStrictValidation:

    def test_valid_batch(self):
        report = validate_events([make_event(1), make_event(2, action="ledger")])
        assert report.ok
        assert report.total == 2
        assert report.action_counts == {"comms": 1, "ledger": 1}

    def test_seed_events_are_valid(self):
        report = validate_events(SEED_EVENTS)
        assert report.ok, report.to_dict()
        assert report.total == 24

    def test_missing_misc_data_is_reported_with_index(self):
        batch = [make_event(1), make_event(2), make_event(3), make_event(4)]
        del batch[3]["misc_data"]

        report = validate_events(batch)

        assert not report.ok
        violation = report.violations[0]
        assert violation.kind == "MissingFieldError"
        assert violation.to_dict()["field"] == "misc_data"
        assert violation.to_dict()["index"] == 3

    def test_all_violations_are_collected(self):
        batch = [
            {"event_order": 1},
            make_event(1, delay=-5),
            make_event("x", misc_data=[1, 2]),
        ]
        report = validate_events(batch)

        missing = [v for v in report.violations if v.kind == "MissingFieldError"]
        assert len(missing) == len(REQUIRED_FIELDS) - 1
        assert "DuplicateOrderError" in kinds(report)
        fields = {(v.to_dict()["field"], v.to_dict()["index"]) for v in report.violations if v.kind == "TypeError"}
        assert ("delay", 1) in fields
        assert ("event_order", 2) in fields
        assert ("misc_data", 2) in fields

    def test_duplicate_order_in_batch(self):
        report = validate_events([make_event(5), make_event(6), make_event(5)])
        assert kinds(report) == ["DuplicateOrderError"]
        assert report.violations[0].to_dict()["index"] == 2
        assert report.violations[0].to_dict()["order"] == 5

    def test_null_order_means_allocate(self):
        report = validate_events([make_event(None), make_event(None)])
        assert report.ok

    def test_bool_is_not_an_integer(self):
        report = validate_events([make_event(True)])
        assert kinds(report) == ["TypeError"]

    def test_non_object_item(self):
        report = validate_events([make_event(1), "nope"])
        assert report.violations[0].to_dict() == {
            "kind": "TypeError",
            "message": "Field '<item>' at index 1 is invalid: expected object",
            "field": "<item>",
            "index": 1,
            "expected": "object",
        }

    def test_batch_must_be_a_list(self):
        report = validate_events({"event_order": 1})
        assert not report.ok
        assert report.violations[0].kind == "TypeError"

    def test_action_must_be_short_non_empty_string(self):
        report = validate_events([make_event(1, action=""), make_event(2, action="x" * 51)])
        assert kinds(report) == ["TypeError", "TypeError"]

    def test_text_fields_must_be_strings(self):
        report = validate_events([make_event(1, static_text=5, api_prompt=["x"], generated_content={"a": 1})])
        fields = [v.to_dict()["field"] for v in report.violations]
        assert kinds(report) == ["TypeError"] * 3
        assert fields == ["static_text", "api_prompt", "generated_content"]

    def test_content_alias_must_be_a_string(self):
        report = EventValidator().validate([{"action": "comms", "content": 42}], strict=False)
        assert report.violations[0].to_dict()["field"] == "content"

    def test_is_generated_must_be_boolean(self):
        assert validate_events([make_event(1, is_generated=True), make_event(2, is_generated=None)]).ok

        report = validate_events([make_event(1, is_generated="yes")])
        assert kinds(report) == ["TypeError"]
        assert report.violations[0].to_dict()["field"] == "is_generated"

    def test_event_order_must_fit_integer_column(self):
        assert validate_events([make_event(MAX_INT), make_event(-MAX_INT)]).ok

        report = validate_events([make_event(10 ** 20), make_event(MAX_INT + 1)])
        assert kinds(report) == ["TypeError", "TypeError"]
        assert {v.to_dict()["field"] for v in report.violations} == {"event_order"}

    def test_delay_must_fit_integer_column(self):
        assert validate_events([make_event(1, delay=MAX_INT)]).ok

        report = validate_events([make_event(1, delay=MAX_INT + 1)])
        assert kinds(report) == ["TypeError"]
        assert report.violations[0].to_dict()["field"] == "delay"

    def test_raise_for_violations(self):
        report = validate_events([make_event(1, delay="soon")])
        with pytest.raises(ValidationError) as exc_info:
            report.raise_for_violations()
        payload = exc_info.value.to_dict()
        assert payload["kind"] == "ValidationError"
        assert payload["count"] == 1
        assert payload["violations"][0]["field"] == "delay"


class TestRelaxedValidation:

    def test_only_action_is_required(self):
        report = EventValidator().validate([{"action": "audioLog"}], strict=False)
        assert report.ok

    def test_missing_action(self):
        report = EventValidator().validate([{"static_text": "hi"}], strict=False)
        assert kinds(report) == ["MissingFieldError"]

    def test_authored_orders_are_not_checked(self):
        report = EventValidator().validate(
            [{"action": "comms", "event_order": 1}, {"action": "comms", "event_order": 1}],
            strict=False,
        )
        assert report.ok


@given(st.lists(st.integers(min_value=1, max_value=10_000), unique=True, max_size=30))
def test_unique_orders_always_pass(orders):
    """批次内 event_order 互不相同时不会报重复"""
    report = validate_events([make_event(order) for order in orders])
    assert report.ok
    assert report.total == len(orders)
