# pm_core/tracking/tests/test_engine.py
import logging
from datetime import date
from decimal import Decimal

import pytest

from pm_core.parts.records import PartRecord
from pm_core.tracking.engine import (
    Condition,
    Rule,
    RuleEvaluator,
    RuleSet,
    evaluate_condition,
    evaluate_rule,
    should_track,
)

ENGINE_LOGGER = "pm_core.tracking.engine"

acme = RuleEvaluator(known_columns={"supplier", "article_code", "location"})

TRUE = Condition(column_name="materiaal", operator="equals", value="MDF")
FALSE = Condition(column_name="materiaal", operator="equals", value="Eik")
MDF_PART = {"materiaal": "MDF", "dikte": "18", "cnc_pos": "A2", "commentaar": None}


# ---------------------------------------------------------------------
# Conditions
# ---------------------------------------------------------------------
@pytest.mark.parametrize(
    "operator,value,expected",
    [
        ("equals", "mdf", True),
        ("equals", "  MDF ", True),
        ("equals", "MDF 18", False),
        ("not_equals", "Eik", True),
        ("not_equals", "Mdf", False),
        ("contains", "d", True),
        ("contains", "x", False),
        ("not_contains", "x", True),
        ("not_contains", "DF", False),
        ("starts_with", "md", True),
        ("starts_with", "df", False),
        ("ends_with", "DF", True),
        ("ends_with", "MD", False),
    ],
)
def test_string_operators_case_insensitive(operator, value, expected):
    cond = Condition(column_name="materiaal", operator=operator, value=value)
    assert evaluate_condition(cond, MDF_PART) is expected


@pytest.mark.parametrize("value", [None, "", "anything", "MDF"])
def test_value_free_operators_ignore_value(value):
    empty = Condition(column_name="commentaar", operator="is_empty", value=value)
    not_empty = Condition(column_name="materiaal", operator="is_not_empty", value=value)

    assert evaluate_condition(empty, MDF_PART) is True
    assert evaluate_condition(not_empty, MDF_PART) is True


@pytest.mark.parametrize("field_value", [None, "", "   "])
def test_is_empty_on_blank_values(field_value):
    cond = Condition(column_name="commentaar", operator="is_empty")
    assert evaluate_condition(cond, {"commentaar": field_value}) is True
    assert evaluate_condition(Condition(column_name="commentaar", operator="is_not_empty"), {"commentaar": field_value}) is False


def test_absent_field_reads_as_empty_string():
    assert evaluate_condition(Condition(column_name="abd", operator="is_empty"), MDF_PART) is True
    assert evaluate_condition(Condition(column_name="abd", operator="equals", value="x"), MDF_PART) is False
    assert evaluate_condition(Condition(column_name="abd", operator="not_equals", value="x"), MDF_PART) is True


@pytest.mark.parametrize(
    "operator,field_value,value,expected",
    [
        ("greater_than", "18", "8", True),  # numeric, not lexicographic
        ("greater_than", "8", "18", False),
        ("less_than", "8", "18", True),
        ("greater_than", "18,5", "18.2", True),  # comma decimal separator
        ("less_than", 2, "3", True),
        ("greater_than", Decimal("2.5"), "2", True),
        ("greater_than", "18", "18", False),
        ("less_than", "18", "18", False),
        ("greater_than", "2024-05-02", "2024-05-01", True),
        ("less_than", date(2024, 1, 1), "2024-05-01", True),
        ("greater_than", "abc", "10", False),
        ("less_than", "", "10", False),
        ("greater_than", "NaN", "1", False),
        ("greater_than", "1E+20", "5", True),
        ("greater_than", "5", "1E-999999999999999999999", False),  # not compared as a number
        ("less_than", "5", "1E-999999999999999999999", False),
        ("less_than", "1E+999999999", "1", False),
    ],
)
def test_ordering_operators(operator, field_value, value, expected):
    cond = Condition(column_name="lengte", operator=operator, value=value)
    assert evaluate_condition(cond, {"lengte": field_value}) is expected


def test_missing_value_on_value_operator_is_false(caplog):
    cond = Condition(column_name="materiaal", operator="equals", value=None)
    with caplog.at_level(logging.WARNING, logger=ENGINE_LOGGER):
        assert evaluate_condition(cond, MDF_PART) is False
    assert any("has no value" in r.getMessage() for r in caplog.records)


@pytest.mark.parametrize("operator", ["equals", "contains", "starts_with", "not_equals", "greater_than"])
@pytest.mark.parametrize("value", ["", "   "])
def test_blank_value_on_value_operator_is_false(operator, value, caplog):
    cond = Condition(column_name="commentaar", operator=operator, value=value)
    with caplog.at_level(logging.WARNING, logger=ENGINE_LOGGER):
        assert evaluate_condition(cond, MDF_PART) is False
        assert evaluate_condition(cond, {"commentaar": ""}) is False
    assert any("has no value" in r.getMessage() for r in caplog.records)


def test_unknown_column_fails_closed(caplog):
    cond = Condition(column_name="supplier", operator="is_empty")
    with caplog.at_level(logging.WARNING, logger=ENGINE_LOGGER):
        assert evaluate_condition(cond, {"supplier": ""}) is False
    assert any("Unknown tracking column" in r.getMessage() for r in caplog.records)


def test_unknown_operator_is_false_and_logged_not_raised(caplog):
    cond = Condition(column_name="supplier", operator="matches_regex", value="^Ac")
    part = {"supplier": "Acme", "article_code": ""}

    with caplog.at_level(logging.WARNING, logger=ENGINE_LOGGER):
        assert acme.evaluate_condition(cond, part) is False

    warnings = [r for r in caplog.records if r.levelno == logging.WARNING and r.name == ENGINE_LOGGER]
    assert warnings
    assert "matches_regex" in warnings[0].getMessage()


# ---------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------
@pytest.mark.parametrize(
    "conditions,and_expected,or_expected",
    [
        ([TRUE, TRUE], True, True),
        ([TRUE, FALSE], False, True),
        ([FALSE, TRUE], False, True),
        ([FALSE, FALSE], False, False),
        ([TRUE], True, True),
        ([FALSE], False, False),
    ],
)
def test_and_or_truth_table(conditions, and_expected, or_expected):
    assert evaluate_rule(Rule(logic_operator="AND", conditions=conditions), MDF_PART) is and_expected
    assert evaluate_rule(Rule(logic_operator="OR", conditions=conditions), MDF_PART) is or_expected


@pytest.mark.parametrize("logic", ["AND", "OR"])
def test_empty_rule_never_matches(logic):
    assert evaluate_rule(Rule(logic_operator=logic, conditions=[]), MDF_PART) is False


def test_unknown_logic_operator_is_false(caplog):
    with caplog.at_level(logging.WARNING, logger=ENGINE_LOGGER):
        assert evaluate_rule(Rule(logic_operator="XOR", conditions=[TRUE]), MDF_PART) is False
    assert any("logic operator" in r.getMessage() for r in caplog.records)


def test_logic_operator_is_case_insensitive():
    assert evaluate_rule(Rule(logic_operator="and", conditions=[TRUE, TRUE]), MDF_PART) is True


# ---------------------------------------------------------------------
# Rule sets
# ---------------------------------------------------------------------
def test_empty_rule_set_never_tracks():
    assert should_track(RuleSet(rules=[]), MDF_PART) is False
    assert should_track(RuleSet(), {}) is False


def test_rule_set_is_or_across_groups():
    no_1 = Rule(logic_operator="AND", conditions=[TRUE, FALSE])
    no_2 = Rule(logic_operator="OR", conditions=[FALSE])
    yes = Rule(logic_operator="AND", conditions=[TRUE])
    empty = Rule(logic_operator="OR", conditions=[])

    assert should_track(RuleSet(rules=[no_1, no_2, empty]), MDF_PART) is False
    assert should_track(RuleSet(rules=[no_1, yes, no_2, empty]), MDF_PART) is True


def test_matching_rule_indexes():
    rs = RuleSet(
        rules=[
            Rule(conditions=[FALSE]),
            Rule(conditions=[TRUE]),
            Rule(logic_operator="AND", conditions=[TRUE, TRUE]),
        ]
    )
    evaluator = RuleEvaluator()
    assert evaluator.matching_rule_indexes(rs, MDF_PART) == [1, 2]


def test_compiled_rule_set_can_be_reused():
    rs = RuleSet(rules=[Rule(conditions=[Condition(column_name="dikte", operator="greater_than", value="10")])])
    matches = RuleEvaluator().compile_rule_set(rs)

    assert [matches(p) for p in ({"dikte": "18"}, {"dikte": "8"}, {"dikte": "19"}, {})] == [True, False, True, False]


# ---------------------------------------------------------------------
# Example scenarios
# ---------------------------------------------------------------------
ACME_PART = {"supplier": "Acme", "article_code": ""}


def test_acme_and_scenario():
    rule = Rule(
        logic_operator="AND",
        conditions=[
            Condition(column_name="supplier", operator="equals", value="Acme"),
            Condition(column_name="article_code", operator="is_empty"),
        ],
    )
    assert acme.evaluate_rule(rule, ACME_PART) is True


def test_acme_or_scenario_with_non_matching_condition():
    rule = Rule(
        logic_operator="OR",
        conditions=[
            Condition(column_name="supplier", operator="equals", value="Acme"),
            Condition(column_name="article_code", operator="is_empty"),
            Condition(column_name="article_code", operator="equals", value="X1"),
        ],
    )
    assert acme.evaluate_condition(rule.conditions[2], ACME_PART) is False
    assert acme.evaluate_rule(rule, ACME_PART) is True


# ---------------------------------------------------------------------
# Records & value types
# ---------------------------------------------------------------------
def test_part_record_maps_csv_labels_and_drops_unknown_keys():
    record = PartRecord.from_mapping({"CNC pos": "A1", "Wand Naam": "Kast", "supplier": "Acme", "aantal": 3})

    assert dict(record) == {"cnc_pos": "A1", "wand_naam": "Kast", "aantal": 3}
    assert should_track(
        RuleSet(rules=[Rule(conditions=[Condition(column_name="cnc_pos", operator="starts_with", value="a")])]),
        record,
    )


def test_rule_equality_ignores_ids():
    a = Rule(id="tmp-1", logic_operator="AND", conditions=[Condition(id=1, column_name="nerf", operator="is_empty")])
    b = Rule(id="db-uuid", logic_operator="AND", conditions=(Condition(id=2, column_name="nerf", operator="is_empty"),))
    assert a == b
    assert RuleSet(rules=[a], version=1) == RuleSet(rules=[b], version=7)
