"""Tests for the command line interface."""

import json

import pytest

import convman
from convman import __main__ as cli


@pytest.fixture(autouse=True)
def no_logging_setup(monkeypatch):
    monkeypatch.setattr(cli, "configure_logging", lambda debug: None)


def test_version(capsys):
    cli.main(["--version"])

    assert capsys.readouterr().out.strip() == convman.__version__


def test_missing_command(capsys):
    with pytest.raises(SystemExit) as error:
        cli.main([])

    assert error.value.code == 1
    assert "usage: convman" in capsys.readouterr().out


def test_receive(config_file, messenger_payload, tmp_path, capsys):
    data = tmp_path / "payload.json"
    data.write_text(json.dumps(messenger_payload()))

    cli.main(["receive", "-c", config_file(), "-d", str(data)])

    output = json.loads(capsys.readouterr().out)
    assert output["mid"] == "m_AG5Hz2Uq7tuwNEhXfYYKj8mJEM"
    assert output["conversation"]
    assert output["nlp"]["intent"] == {"name": "book_table"}
    assert {"type": "int", "name": "nb_persons", "confidence": 0.87, "value": 3,
            "role": ""} in output["nlp"]["entities"]


def test_receive_with_invalid_config(config_file, tmp_path):
    data = tmp_path / "payload.json"
    data.write_text("{}")

    with pytest.raises(SystemExit) as error:
        cli.main(["receive", "-c", config_file(listening_port="5005"), "-d", str(data)])

    assert error.value.code == 1


def test_run(config_file, monkeypatch):
    served = {}

    def serve(config, port=None):
        served["config"] = config
        served["port"] = port

    monkeypatch.setattr("convman.server.run_server.serve", serve)

    cli.main(["run", "-c", config_file(), "-p", "8080"])

    assert served["port"] == 8080
    assert served["config"].fb_verify_token == "app_verify_token"
