"""
Command Line Tests

Usage:
    pytest tests/test_cli.py -v
"""

import io
import json
import logging

import pytest

from sealkit import cli, config
from sealkit.aes_gcm import generate_key


@pytest.fixture(autouse=True)
def reset_logging():
    """setup_logging() attaches a handler to the package logger; drop it after each test."""
    yield
    logger = logging.getLogger("sealkit")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


def run(capsys, *argv):
    code = cli.main(list(argv))
    captured = capsys.readouterr()
    return code, captured.out.rstrip("\n"), captured.err


class TestEnvelopeCommands:
    """genkey / encrypt / decrypt."""

    def test_genkey(self, capsys):
        code, out, _ = run(capsys, "genkey")

        assert code == 0
        assert len(out) == 64
        bytes.fromhex(out)

    def test_encrypt_then_decrypt(self, capsys):
        key = generate_key()

        code, envelope_json, _ = run(capsys, "encrypt", "--key", key, "Héllò 🚀")
        assert code == 0
        assert set(json.loads(envelope_json)) == {"data", "iv", "tag"}

        code, plaintext, _ = run(capsys, "decrypt", "--key", key, envelope_json)
        assert code == 0
        assert plaintext == "Héllò 🚀"

    def test_encrypt_reads_stdin(self, capsys, monkeypatch):
        key = generate_key()
        monkeypatch.setattr("sys.stdin", io.StringIO("from stdin"))

        code, envelope_json, _ = run(capsys, "encrypt", "-k", key)
        assert code == 0

        code, plaintext, _ = run(capsys, "decrypt", "-k", key, envelope_json)
        assert plaintext == "from stdin"

    def test_decrypt_with_wrong_key(self, capsys):
        _, envelope_json, _ = run(capsys, "encrypt", "--key", generate_key(), "secret")

        code, out, err = run(capsys, "decrypt", "--key", generate_key(), envelope_json)

        assert code == 1
        assert out == ""
        assert "error: decryption_failed" in err

    def test_invalid_key(self, capsys):
        code, _, err = run(capsys, "encrypt", "--key", "abcd", "secret")

        assert code == 1
        assert "error: invalid_key" in err

    def test_malformed_envelope(self, capsys):
        code, _, err = run(capsys, "decrypt", "--key", generate_key(), "{not json")

        assert code == 1
        assert "error: malformed_envelope" in err

    def test_missing_key(self, capsys, monkeypatch):
        monkeypatch.setattr(config, "DEFAULT_KEY", None)

        with pytest.raises(SystemExit) as exc_info:
            cli.main(["encrypt", "secret"])
        assert exc_info.value.code == 2

    def test_key_from_environment_default(self, capsys, monkeypatch):
        key = generate_key()
        monkeypatch.setattr(config, "DEFAULT_KEY", key)

        _, envelope_json, _ = run(capsys, "encrypt", "secret")
        code, plaintext, _ = run(capsys, "decrypt", "--key", key, envelope_json)

        assert code == 0
        assert plaintext == "secret"


class TestTokenCommands:
    """sign / verify."""

    def test_sign_then_verify(self, capsys):
        code, token, _ = run(capsys, "sign", "--secret", "s3cret", '{"sub": "12345", "name": "John Doe"}')
        assert code == 0
        assert token.count(".") == 2

        code, out, _ = run(capsys, "verify", "--secret", "s3cret", token)
        assert code == 0
        assert json.loads(out) == {"sub": "12345", "name": "John Doe"}

    def test_sign_with_ttl(self, capsys):
        _, token, _ = run(capsys, "sign", "-s", "s3cret", "--ttl", "3600", '{"sub": "12345"}')
        _, out, _ = run(capsys, "verify", "-s", "s3cret", token)

        assert "exp" in json.loads(out)

    def test_negative_ttl_gives_expired_token(self, capsys):
        _, token, _ = run(capsys, "sign", "-s", "s3cret", "--ttl", "-10", '{"sub": "12345"}')
        code, _, err = run(capsys, "verify", "-s", "s3cret", token)

        assert code == 1
        assert "error: token_expired" in err

    def test_verify_with_wrong_secret(self, capsys):
        _, token, _ = run(capsys, "sign", "-s", "s3cret", '{"sub": "12345"}')
        code, _, err = run(capsys, "verify", "-s", "other", token)

        assert code == 1
        assert "error: invalid_signature" in err

    def test_verify_garbage(self, capsys):
        code, _, err = run(capsys, "verify", "-s", "s3cret", "this-is-not-a-jwt")

        assert code == 1
        assert "error: malformed_token" in err

    @pytest.mark.parametrize("claims", ["{not json", "[1, 2]"])
    def test_sign_invalid_claims(self, capsys, claims):
        code, _, err = run(capsys, "sign", "-s", "s3cret", claims)

        assert code == 1
        assert "error: invalid_claims" in err

    def test_missing_secret(self, monkeypatch):
        monkeypatch.setattr(config, "DEFAULT_SECRET", None)

        with pytest.raises(SystemExit) as exc_info:
            cli.main(["verify", "a.b.c"])
        assert exc_info.value.code == 2


def test_unknown_log_level():
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["--log-level", "chatty", "genkey"])
    assert exc_info.value.code == 2


@pytest.mark.parametrize("argv", [
    ["--log-level", "DEBUG", "genkey"],
    ["genkey", "--log-level", "DEBUG"],
])
def test_log_level_before_or_after_command(capsys, argv):
    code, out, _ = run(capsys, *argv)

    assert code == 0
    assert len(out) == 64
    assert logging.getLogger("sealkit").level == logging.DEBUG


def test_subcommand_log_level_with_options(capsys):
    key = generate_key()

    code, envelope_json, _ = run(capsys, "encrypt", "--log-level", "ERROR", "--key", key, "secret")

    assert code == 0
    assert logging.getLogger("sealkit").level == logging.ERROR
    assert set(json.loads(envelope_json)) == {"data", "iv", "tag"}
