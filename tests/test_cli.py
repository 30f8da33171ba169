import json

from rental_engine.ui.cli import main


def test_cli_prints_breakdown(capsys):
    code = main(
        ["--rate", "120", "--pickup", "2025-06-01", "--return", "2025-06-04", "--insurance", "standard", "--add-on", "gps"]
    )
    assert code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["total"] == 531.0
    assert payload["tax"] == 81.0


def test_cli_writes_output(tmp_path, capsys):
    output = tmp_path / "reports" / "quote.json"
    code = main(["--rate", "100", "--pickup", "2025-06-01", "--return", "2025-06-01", "--output", str(output)])
    assert code == 0
    payload = json.loads(output.read_text(encoding="utf-8"))
    assert payload["days"] == 1
    assert payload["insurance_subtotal"] == 15.0


def test_cli_validation_error_exit_code(capsys):
    code = main(["--rate", "100", "--pickup", "2025-06-05", "--return", "2025-06-01"])
    assert code == 2
    assert "return_date" in capsys.readouterr().err


def test_cli_unknown_insurance(capsys):
    assert main(["--rate", "100", "--pickup", "2025-06-01", "--return", "2025-06-02", "--insurance", "gold"]) == 2
