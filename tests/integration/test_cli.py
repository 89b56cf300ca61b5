"""
Integration tests for the rulechain command-line front-end.

Runs the CLI end to end against rule and record files on disk.
"""

import json

import pytest
import yaml

from rulechain.cli.validate_cli import EXIT_CONFIG_ERROR, EXIT_FAILED, EXIT_OK, load_records, main

RULES = {
    "rules": {
        "email": "required|email",
        "age": "required|integer|between:18,120",
        "users.*.email": "required|email",
    },
    "messages": {"email.required": "We need your email."},
    "attributes": {"age": "age in years"},
}


def write_json(path, data):
    path.write_text(json.dumps(data))
    return path


@pytest.mark.integration
def test_check_valid_records(tmp_path, rules_file, capsys):
    """Test a clean batch exits 0 and reports every record"""
    rules = rules_file(RULES)
    records = write_json(tmp_path / "records.json", [
        {"id": "a", "email": "ann@example.com", "age": 30, "users": []},
        {"id": "b", "email": "bob@example.com", "age": "45"},
    ])

    code = main(["check", "--rules", str(rules), "--input", str(records), "--log-format", "text"])
    report = json.loads(capsys.readouterr().out)

    assert code == EXIT_OK
    assert report["total_records"] == 2
    assert report["invalid_records"] == 0
    assert [r["record_id"] for r in report["results"]] == ["a", "b"]


@pytest.mark.integration
def test_check_invalid_record(tmp_path, rules_file, capsys):
    """Test failures exit 1 with rendered messages per field"""
    rules = rules_file(RULES)
    records = write_json(tmp_path / "records.json", {
        "age": "12",
        "users": [{"email": "ok@example.com"}, {"email": "broken"}],
    })

    code = main(["check", "--rules", str(rules), "--input", str(records)])
    report = json.loads(capsys.readouterr().out)
    result = report["results"][0]

    assert code == EXIT_FAILED
    assert result["passed"] is False
    assert result["errors"] == {
        "email": ["We need your email."],
        "age": ["The age in years must be between 18 and 120."],
        "users.1.email": ["The users.1.email must be a valid email address."],
    }
    assert result["failed_rules"] == ["email.required", "age.between", "users.1.email.email"]


@pytest.mark.integration
def test_check_stop_on_first_failure(tmp_path, rules_file, capsys):
    rules = rules_file(RULES)
    records = write_json(tmp_path / "records.json", {"age": "12"})

    code = main(["check", "--rules", str(rules), "--input", str(records), "--stop-on-first-failure"])
    result = json.loads(capsys.readouterr().out)["results"][0]

    assert code == EXIT_FAILED
    assert result["errors"] == {"email": ["We need your email."]}


@pytest.mark.integration
def test_check_yaml_input(tmp_path, rules_file, capsys):
    rules = rules_file(RULES)
    records = tmp_path / "records.yaml"
    records.write_text(yaml.safe_dump([{"email": "ann@example.com", "age": 20}]))

    assert main(["check", "--rules", str(rules), "--input", str(records)]) == EXIT_OK
    assert json.loads(capsys.readouterr().out)["valid_records"] == 1


@pytest.mark.integration
def test_check_unknown_rule_is_config_error(tmp_path, rules_file, capsys):
    rules = rules_file({"rules": {"email": "required|emial"}})
    records = write_json(tmp_path / "records.json", {"email": "ann@example.com"})

    assert main(["check", "--rules", str(rules), "--input", str(records)]) == EXIT_CONFIG_ERROR
    assert capsys.readouterr().out == ""


@pytest.mark.integration
def test_check_missing_rules_file(tmp_path):
    records = write_json(tmp_path / "records.json", {})
    code = main(["check", "--rules", str(tmp_path / "nope.yaml"), "--input", str(records)])
    assert code == EXIT_CONFIG_ERROR


@pytest.mark.integration
def test_check_missing_input_file(tmp_path, rules_file):
    rules = rules_file(RULES)
    code = main(["check", "--rules", str(rules), "--input", str(tmp_path / "nope.json")])
    assert code == EXIT_CONFIG_ERROR


@pytest.mark.integration
def test_check_malformed_input(tmp_path, rules_file):
    rules = rules_file(RULES)
    records = tmp_path / "records.json"
    records.write_text("[1, 2, 3]")

    assert main(["check", "--rules", str(rules), "--input", str(records)]) == EXIT_CONFIG_ERROR


@pytest.mark.integration
def test_rules_command_lists_catalogue(capsys):
    assert main(["rules"]) == EXIT_OK
    names = capsys.readouterr().out.split()

    assert "required" in names
    assert "regex" in names
    assert names == sorted(names)


@pytest.mark.integration
def test_no_command_prints_help(capsys):
    assert main([]) == EXIT_FAILED
    assert "usage" in capsys.readouterr().out.lower()


@pytest.mark.integration
def test_load_records_rejects_bad_json(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("{not json")
    with pytest.raises(ValueError, match="Could not parse"):
        load_records(path)
