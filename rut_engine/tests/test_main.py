"""
Tests for main CLI module.
"""

import argparse
import random
from unittest.mock import patch

import pytest

from rut_engine.correlative import generate_valid_rut
from rut_engine.errors import RegistryUnavailableError
from rut_engine.main import build_validator, check_ruts, create_parser, main, positive_int
from rut_engine.registry import RegistryValidator
from rut_engine.validators import SimpleValidator


@pytest.fixture(autouse=True)
def no_logging_setup():
    """Keep the CLI from reconfiguring logging for the whole test session."""
    with patch("rut_engine.main.configure_logging") as mock_configure:
        yield mock_configure


class TestParser:

    def test_requires_command(self):
        with pytest.raises(SystemExit) as exc_info:
            create_parser().parse_args([])
        assert exc_info.value.code == 2

    def test_unknown_mode(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["format", "1-9", "--mode", "fancy"])

    def test_positive_int(self):
        assert positive_int("42") == 42
        with pytest.raises(argparse.ArgumentTypeError):
            positive_int("0")
        with pytest.raises(argparse.ArgumentTypeError):
            positive_int("abc")

    def test_log_overrides_forwarded(self, no_logging_setup, capsys):
        main(["--log-level", "DEBUG", "--log-format", "text", "verifier", "1"])
        no_logging_setup.assert_called_once_with("DEBUG", "text")


class TestCheck:

    def test_all_valid(self, capsys):
        assert main(["check", "12.345.678-5", "1000005k"]) == 0

        out = capsys.readouterr().out.splitlines()
        assert out == ["12.345.678-5\tOK", "1.000.005-K\tOK"]

    def test_some_invalid(self, capsys):
        assert main(["check", "--", "12.345.678-5", "11.111.111-2", "----"]) == 1

        out = capsys.readouterr().out.splitlines()
        assert out[0] == "12.345.678-5\tOK"
        assert out[1].startswith("11.111.111-2\tINVALID: verifier 2")
        assert out[2].startswith("----\tINVALID: RUT too short")

    def test_check_ruts_counts_invalid(self, capsys):
        assert check_ruts(["1-9", "1-8", "x"], SimpleValidator()) == 2

    def test_build_validator(self):
        assert len(build_validator()) == 1

    def test_registry_flag(self, registry_env):
        chain = build_validator(use_registry=True)
        members = list(chain)

        assert isinstance(members[0], SimpleValidator)
        assert isinstance(members[1], RegistryValidator)
        members[1].close()

    def test_registry_without_url(self, monkeypatch, capsys):
        monkeypatch.setenv("REGISTRY_BASE_URL", "")

        assert main(["check", "--registry", "12.345.678-5"]) == 1
        assert "not configured" in capsys.readouterr().err

    def test_registry_unavailable(self, registry_env, capsys):
        with patch.object(
            RegistryValidator, "validate", side_effect=RegistryUnavailableError("down")
        ):
            assert main(["check", "--registry", "12.345.678-5"]) == 1

        assert "down" in capsys.readouterr().err


class TestFormat:

    @pytest.mark.parametrize(
        "mode,expected",
        [
            ("clear", "342442234"),
            ("readable", "34.244.223-4"),
            ("hyphened", "34244223-4"),
            ("hidden", "34.***.***-4"),
        ],
    )
    def test_modes(self, mode, expected, capsys):
        assert main(["format", "34244223-4", "--mode", mode]) == 0
        assert capsys.readouterr().out.strip() == expected

    def test_default_mode_from_settings(self, monkeypatch, capsys):
        monkeypatch.setenv("DEFAULT_FORMAT", "hyphened")

        assert main(["format", "34.244.223-4"]) == 0
        assert capsys.readouterr().out.strip() == "34244223-4"

    def test_does_not_validate(self, capsys):
        assert main(["format", "12345678-9", "--mode", "readable"]) == 0
        assert capsys.readouterr().out.strip() == "12.345.678-9"

    def test_malformed(self, capsys):
        assert main(["format", "123456X7"]) == 1
        assert "error:" in capsys.readouterr().err


class TestVerifierAndGenerate:

    def test_verifier(self, capsys):
        assert main(["verifier", "1000005"]) == 0
        assert capsys.readouterr().out.strip() == "K"

    def test_verifier_rejects_zero(self):
        with pytest.raises(SystemExit):
            main(["verifier", "0"])

    def test_generate_seeded(self, capsys):
        assert main(["generate", "--count", "3", "--seed", "5", "--mode", "hyphened"]) == 0

        rng = random.Random(5)
        expected = [generate_valid_rut(rng).format("hyphened") for _ in range(3)]
        assert capsys.readouterr().out.splitlines() == expected

    def test_generate_output_is_valid(self, capsys):
        assert main(["generate", "--count", "5"]) == 0

        for line in capsys.readouterr().out.splitlines():
            assert check_ruts([line], SimpleValidator()) == 0
