"""
Tests for the profile evaluator

End-to-end evaluation of profiles against trust indicator sets:
- Report shape and ordering
- Data blocks published to the report and to profile.*
- Variables, registered expressions, includes
- Isolation between runs
- Error propagation
"""
import copy
import logging

import pytest

from trustprofile import EvaluatorSettings, ProfileEvaluator
from trustprofile.exceptions import (
    ConfigurationError,
    ExpressionEvaluationError,
    NotLoadedError,
    ProfileValidationError,
)

from tests.conftest import FIXTURES, profile_text


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def evaluator():
    return ProfileEvaluator()


@pytest.fixture
def blocks_report(evaluator, indicators):
    evaluator.load_profile(FIXTURES / "blocks_profile.yml")
    return evaluator.evaluate(indicators).to_dict()


def find(report, statement_id):
    for section in report["statements"]:
        for statement in section:
            if statement["id"] == statement_id:
                return statement
    return None


def evaluate_text(text, subject=None, **settings):
    evaluator = ProfileEvaluator(settings=EvaluatorSettings(**settings))
    evaluator.load_profile_from_string(text)
    return evaluator.evaluate(subject or {}).to_dict()


# =============================================================================
# Core Property Tests
# =============================================================================

class TestCoreProperties:
    """Small profiles exercising each rule of the evaluation loop."""

    def test_numeric_expression_statement(self):
        report = evaluate_text(profile_text("""
            - id: t1
              expression: 20 + 5
              report_text:
                true:
                  en: Yes
                false:
                  en: No
        """))
        assert report["statements"] == [[{"id": "t1", "value": 25}]]

    def test_boolean_expression_statement(self):
        report = evaluate_text(profile_text("""
            - id: t2
              expression: score > 10
              report_text:
                true:
                  en: Yes
                false:
                  en: No
        """), {"score": 3})
        assert report["statements"] == [[{"id": "t2", "value": False, "report_text": "No"}]]

    def test_array_block_published(self):
        report = evaluate_text(profile_text("""
            - block:
                name: arr
                value: [1, "{{ref}}", "plain"]
            - id: uses_arr
              expression: profile.arr[1]
              report_text: {}
        """), {"ref": "x"})
        assert report["arr"] == [1, "x", "plain"]
        assert find(report, "uses_arr")["value"] == "x"

    def test_header_fields_in_context(self):
        report = evaluate_text(profile_text(
            """
            - id: name
              expression: metadata.name ~ ' / ' ~ custom.owner
              report_text: {}
            """,
            header="""
            metadata:
              name: Test Profile
              issuer: Trust Profile Test Suite
              version: 1.0.0
              date: 2025-06-17
            custom:
              owner: Example Co.
            """,
        ))
        assert find(report, "name")["value"] == "Test Profile / Example Co."

    def test_variables_bound(self):
        report = evaluate_text(profile_text(
            """
            - id: over
              expression: count > limit
              report_text:
                true:
                  en: "Over {{ variables.limit }}"
                false:
                  en: Under
            """,
            header="""
            metadata:
              name: P
              issuer: I
              version: 1
              date: 2025-06-17
            variables:
              limit: 3
            """,
        ), {"count": 5})
        assert find(report, "over") == {"id": "over", "value": True, "report_text": "Over 3"}

    def test_variables_override_subject_names(self):
        report = evaluate_text(profile_text(
            """
            - id: which
              expression: source
              report_text: {}
            """,
            header="""
            metadata: {name: P, issuer: I, version: 1, date: 2025-06-17}
            variables:
              source: variable
            """,
        ), {"source": "subject"})
        assert find(report, "which")["value"] == "variable"

    def test_empty_sections_omitted(self):
        report = evaluate_text(profile_text(
            "- id: first\n  report_text: A",
            "",
            "- block:\n    name: only_block\n    value: '1'",
            "- id: last\n  report_text: B",
        ))
        assert [[s["id"] for s in section] for section in report["statements"]] == [["first"], ["last"]]
        assert report["only_block"] == 1

    def test_report_key_order(self):
        report = evaluate_text(profile_text(
            "- block:\n    name: zeta\n    value: '1'\n- block:\n    name: alpha\n    value: '2'",
            "- id: s\n  report_text: S",
        ))
        assert list(report) == ["profile_metadata", "statements", "zeta", "alpha"]

    def test_statement_order_within_section(self):
        report = evaluate_text(profile_text(
            "- id: c\n  report_text: C\n- id: a\n  report_text: A\n- id: b\n  report_text: B",
        ))
        assert [s["id"] for s in report["statements"][0]] == ["c", "a", "b"]

    def test_later_block_overrides_profile_value(self):
        report = evaluate_text(profile_text("""
            - id: x
              expression: "1"
              report_text: {}
            - block:
                name: x
                value: "2"
            - id: y
              expression: profile.x
              report_text: {}
        """))
        assert find(report, "y")["value"] == 2

    def test_profile_metadata_copied(self):
        report = evaluate_text(profile_text())
        assert report["profile_metadata"] == {
            "name": "Test Profile",
            "issuer": "Trust Profile Test Suite",
            "version": "1.0.0",
            "date": "2025-06-17T22:44:49.717Z",
        }
        assert report["statements"] == []


# =============================================================================
# Fixture Profile Tests
# =============================================================================

class TestBlocksProfile:
    """The blocks fixture profile against the fixture indicators."""

    def test_section_shape(self, blocks_report):
        assert [len(section) for section in blocks_report["statements"]] == [4, 2]

    def test_object_rendering(self, blocks_report):
        assert find(blocks_report, "non-scalers")["report_text"] == (
            'Object - {"alg":"sha256","hash":"na6lb3F/uIdiAhZtZp4Oa2aNCj1UvcHVxx/p5ISE2AA="}'
        )

    def test_missing_helper(self, blocks_report):
        assert find(blocks_report, "missing helper")["report_text"] == "Foo - '🔴 Missing: foo()'"

    def test_registered_expression(self, blocks_report):
        assert find(blocks_report, "test_expression") == {
            "id": "test_expression", "title": "Computed value", "value": 25,
        }

    def test_conditional_expression(self, blocks_report):
        assert find(blocks_report, "test_conditional_expression")["report_text"] == "Status -  Match"

    def test_information_statement(self, blocks_report):
        assert find(blocks_report, "reputation")["report_text"] == "Reputation - good"

    def test_expression_with_variable(self, blocks_report):
        hashed = find(blocks_report, "hashed")
        assert hashed["value"] is True
        assert hashed["report_text"] == "Hashed with sha256"

    def test_metadata(self, blocks_report):
        metadata = blocks_report["profile_metadata"]
        assert metadata["name"] == "Testing Profile"
        assert metadata["version"] == "2.0.0"
        assert metadata["date"] == "2025-06-17T22:44:49.717Z"

    def test_map_block(self, blocks_report):
        assert blocks_report["test_map"] == {
            "alg": "sha256",
            "hash": "na6lb3F/uIdiAhZtZp4Oa2aNCj1UvcHVxx/p5ISE2AA=",
            "noTemplate": True,
        }

    def test_array_block(self, blocks_report):
        assert blocks_report["test_array"] == [
            "sha256", "na6lb3F/uIdiAhZtZp4Oa2aNCj1UvcHVxx/p5ISE2AA=", 123456,
        ]

    def test_scalar_block(self, blocks_report):
        assert blocks_report["test_scaler"] == 4

    def test_structured_returns(self, blocks_report):
        assert blocks_report["test_array_return"] == [{"length": 7520, "start": 2}]
        assert blocks_report["test_map_return"] == {
            "c2pa.hash.data": "assertion.hashedURI.match",
            "c2pa.actions.v2": "assertion.hashedURI.match",
        }

    def test_blocks_reference_earlier_results(self, blocks_report):
        assert blocks_report["test_expression"] == 25
        assert blocks_report["asset_info"]["myNumber"] == 100
        assert blocks_report["asset_info_2"] == blocks_report["asset_info"]

    def test_block_uses_metadata_and_expr(self, blocks_report):
        assert blocks_report["myExample"] == {
            "description": "This is a test example",
            "myDate": "2025-06-17T22:44:49.717Z",
            "myNumber": 25,
        }

    def test_all_blocks_present_in_order(self, blocks_report):
        assert list(blocks_report)[2:] == [
            "test_map", "test_array", "test_scaler", "test_array_return",
            "test_map_return", "test_expression", "asset_info", "asset_info_2",
            "myExample",
        ]


class TestIncludeProfile:
    """The include fixture profile."""

    def test_merged_report(self, evaluator):
        evaluator.load_profile(FIXTURES / "include_profile.yml")
        report = evaluator.evaluate({}).to_dict()

        assert report["profile_metadata"]["didThisWork"] is True
        assert report["profile_metadata"]["aNumber"] == 42
        assert len(report["statements"]) == 3
        assert find(report, "included_check")["report_text"] == "Above threshold"
        assert find(report, "included_text")["report_text"] == "Include Profile includes 42"

    def test_includes_resolved_once(self, evaluator, monkeypatch):
        evaluator.load_profile(FIXTURES / "include_profile.yml")
        calls = []
        resolve = evaluator.include_resolver.resolve
        monkeypatch.setattr(
            evaluator.include_resolver, "resolve",
            lambda document: calls.append(document) or resolve(document),
        )
        evaluator.evaluate({})
        evaluator.evaluate({})
        assert len(calls) == 1


# =============================================================================
# Isolation Tests
# =============================================================================

class TestIsolation:
    """Runs never share state."""

    def test_subject_not_mutated(self, evaluator, indicators):
        evaluator.load_profile(FIXTURES / "blocks_profile.yml")
        before = copy.deepcopy(indicators)
        evaluator.evaluate(indicators)
        assert indicators == before
        assert "profile" not in indicators

    def test_repeated_runs_identical(self, evaluator, indicators):
        evaluator.load_profile(FIXTURES / "blocks_profile.yml")
        assert evaluator.evaluate(indicators).to_dict() == evaluator.evaluate(indicators).to_dict()

    def test_functions_do_not_leak_between_profiles(self, evaluator):
        evaluator.load_profile(FIXTURES / "blocks_profile.yml")
        evaluator.evaluate({})

        evaluator.load_profile_from_string(profile_text("""
            - id: leaked
              expression: square(3)
              report_text: {}
        """))
        with pytest.raises(ExpressionEvaluationError):
            evaluator.evaluate({})

    def test_each_run_has_own_engine(self, evaluator, indicators):
        evaluator.load_profile(FIXTURES / "blocks_profile.yml")
        first = evaluator.run(indicators)
        second = evaluator.run(indicators)
        assert first.engine is not second.engine
        assert first.data_context is not second.data_context
        assert first.data_context["profile"]["test_expression"] == 25

    def test_run_exposes_context_and_variables(self, evaluator, indicators):
        evaluator.load_profile(FIXTURES / "blocks_profile.yml")
        run = evaluator.run(indicators)
        assert run.variables == {"expected_alg": "sha256"}
        assert run.data_context["profile"]["asset_info"]["alg"] == "sha256"
        assert set(run.engine.functions) == {"square", "isHashed"}


# =============================================================================
# Error Tests
# =============================================================================

class TestErrors:
    """Fatal errors propagate and no report is produced."""

    def test_not_loaded(self, evaluator):
        assert evaluator.is_loaded is False
        with pytest.raises(NotLoadedError) as exc:
            evaluator.evaluate({})
        assert exc.value.code == "TP_PROFILE_NOT_LOADED"

    def test_invalid_header(self, evaluator):
        evaluator.load_profile_from_string("metadata:\n  name: Missing fields\n")
        with pytest.raises(ProfileValidationError) as exc:
            evaluator.evaluate({})
        assert exc.value.details["errors"]

    def test_include_can_complete_header(self, tmp_path, evaluator):
        (tmp_path / "meta.yml").write_text(
            "metadata:\n  issuer: I\n  version: 1\n  date: 2025-06-17\n", encoding="utf-8",
        )
        evaluator.load_profile_from_string(
            "metadata:\n  name: Partial\ninclude: meta.yml\n", base_path=tmp_path,
        )
        assert evaluator.evaluate({}).profile_metadata["issuer"] == "I"

    def test_statement_without_id(self):
        with pytest.raises(ConfigurationError):
            evaluate_text(profile_text("- title: No id\n  report_text: x"))

    def test_statement_without_report_text(self):
        with pytest.raises(ConfigurationError):
            evaluate_text(profile_text("- id: s\n  expression: '1'"))

    def test_information_without_report_text_when_relaxed(self):
        report = evaluate_text(
            profile_text("- id: heading\n  title: Section"),
            require_info_report_text=False,
        )
        assert report["statements"] == [[{"id": "heading", "title": "Section"}]]

    def test_reserved_block_name(self):
        with pytest.raises(ConfigurationError):
            evaluate_text(profile_text("- block:\n    name: statements\n    value: '1'"))

    def test_broken_registered_expression(self):
        header = """
        metadata: {name: P, issuer: I, version: 1, date: 2025-06-17}
        expressions:
          broken: "value =="
        """
        with pytest.raises(ExpressionEvaluationError):
            evaluate_text(profile_text(header=header))


# =============================================================================
# Logging Tests
# =============================================================================

class TestLogging:
    """Evaluation logs start and finish at INFO."""

    def test_info_messages(self, evaluator, caplog):
        evaluator.load_profile(FIXTURES / "blocks_profile.yml")
        with caplog.at_level(logging.INFO, logger="trustprofile"):
            evaluator.evaluate({})
        messages = [record.getMessage() for record in caplog.records]
        assert any(m.startswith("Evaluating Testing Profile (2.0.0)") for m in messages)
        finished = [r for r in caplog.records if hasattr(r, "duration_ms")]
        assert finished and finished[0].profile == "Testing Profile (2.0.0)"
