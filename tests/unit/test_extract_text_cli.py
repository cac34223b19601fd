import json

from extract_text import main

from conftest import RG_TEXT


def test_cli_prints_fields_and_rules(tmp_path, capsys):
    text_file = tmp_path / "rg.txt"
    text_file.write_text(RG_TEXT, encoding="utf-8")

    assert main(["rg", str(text_file), "--fields", "nome,rg", "--rules"]) == 0

    output = json.loads(capsys.readouterr().out)
    assert output["documentType"] == "rg"
    assert output["data"] == {"nome": "MARIA DA SILVA SANTOS", "rg": "123456789"}
    assert output["confidence"] == 100
    assert output["rules"]["risk_level"] == "LOW"


def test_cli_unknown_type(tmp_path, capsys):
    text_file = tmp_path / "doc.txt"
    text_file.write_text("qualquer", encoding="utf-8")

    assert main(["passaporte", str(text_file)]) == 2
    assert "passaporte" in capsys.readouterr().out


def test_cli_missing_file(tmp_path):
    assert main(["rg", str(tmp_path / "nao_existe.txt")]) == 2
