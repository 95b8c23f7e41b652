"""
Tests for the command-line interface.
"""
import io
import json

import pytest

from iba import cli
from iba.cli import _flag, build_parser, main, prompt_document, run
from iba.entropy import validate_input
from iba.seed import bind_account, get_fingerprint, legacy_mnemonic, verify_mnemonic

MANUAL_ARGS = ["--pin", "123456", "--names", "ERIKA", "--surname", "MUSTERMANN",
               "--doc-num", "L01X00T47", "--birth-date", "12081983"]


class TestFlags:

    @pytest.mark.parametrize("field,flag", [
        ("names", "--names"),
        ("birthDate", "--birth-date"),
        ("docNum", "--doc-num"),
        ("misc1", "--misc1"),
    ])
    def test_flag_names(self, field, flag):
        assert _flag(field) == flag

    def test_defaults(self):
        args = build_parser().parse_args(["--pin", "1234"])
        assert args.chain == "ETH"
        assert args.words == 12
        assert args.kdf == "scrypt"
        assert not args.legacy

    def test_chain_is_uppercased(self):
        assert build_parser().parse_args(["--chain", "sol"]).chain == "SOL"

    def test_unknown_kdf_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--kdf", "pbkdf2"])


class TestMain:

    def test_manual(self, capsys, manual_doc):
        assert main(MANUAL_ARGS) == 0
        out = capsys.readouterr().out.strip()
        assert out == bind_account("123456", manual_doc)

    def test_mrz_rows(self, capsys, type3_rows):
        argv = ["--pin", "123456", "--row1", type3_rows["row1"], "--row2", type3_rows["row2"],
                "--chain", "btc", "--words", "24"]
        assert main(argv) == 0
        out = capsys.readouterr().out.strip()
        assert out == bind_account("123456", type3_rows, words=24, chain="BTC")

    def test_rows_win_over_manual_fields(self, capsys, type1_rows):
        argv = ["--pin", "123456", "--names", "ERIKA"]
        for row, value in type1_rows.items():
            argv += [f"--{row}", value]
        assert main(argv) == 0
        assert capsys.readouterr().out.strip() == bind_account("123456", type1_rows)

    def test_fingerprint(self, capsys, manual_doc):
        assert main(MANUAL_ARGS + ["--fingerprint"]) == 0
        first, second = capsys.readouterr().out.strip().splitlines()
        assert first == f"fingerprint: {get_fingerprint('123456', manual_doc)}"
        assert verify_mnemonic(second)

    def test_json(self, capsys, manual_doc):
        assert main(MANUAL_ARGS + ["--json", "--words", "18"]) == 0
        result = json.loads(capsys.readouterr().out)
        assert result["document"] == "manual"
        assert result["chain"] == "ETH"
        assert result["words"] == 18
        assert result["kdf"] == "scrypt (N=2^13, r=8, p=1)"
        assert result["fingerprint"] == get_fingerprint("123456", manual_doc)
        assert len(result["mnemonic"].split()) == 18

    def test_legacy(self, capsys, manual_doc):
        assert main(MANUAL_ARGS + ["--legacy"]) == 0
        assert capsys.readouterr().out.strip() == legacy_mnemonic("123456", manual_doc)

    def test_pin_only(self, capsys):
        assert main(["--pin", "123456"]) == 1
        err = capsys.readouterr().err
        assert "a pin and at least one other field must be provided" in err

    def test_missing_pin(self, capsys):
        assert main(["--names", "ERIKA"]) == 1
        assert capsys.readouterr().err.startswith("error:")

    @pytest.mark.parametrize("extra,message", [
        (["--words", "13"], "13"),
        (["--chain", "doge"], "DOGE"),
    ])
    def test_bad_options(self, capsys, extra, message):
        assert main(MANUAL_ARGS + extra) == 1
        err = capsys.readouterr().err
        assert err.startswith("error:")
        assert message in err

    def test_invalid_field(self, capsys):
        argv = ["--pin", "123456", "--names", "ERIKA1"]
        assert main(argv) == 1
        assert "names must be a non-empty string of Latin letters" in capsys.readouterr().err

    def test_bad_row_width(self, capsys):
        argv = ["--pin", "123456", "--row1", "P<D", "--row2", "C01"]
        assert main(argv) == 1
        assert "exactly 44 characters long" in capsys.readouterr().err

    def test_bad_pin_reported_with_field_errors(self, capsys):
        assert main(["--pin", "12", "--names", "ERIKA1"]) == 1
        assert capsys.readouterr().err.strip() == (
            "error: names must be a non-empty string of Latin letters; "
            "pin must be 4 to 12 digits"
        )


class TestRun:

    def test_writes_to_given_stream(self, manual_doc):
        out = io.StringIO()
        assert run("123456", manual_doc, out=out) == 0
        assert out.getvalue().strip() == bind_account("123456", manual_doc)

    def test_words_as_string(self, manual_doc):
        out = io.StringIO()
        assert run("123456", manual_doc, words="24", out=out) == 0
        assert len(out.getvalue().split()) == 24

    def test_validates_once(self, monkeypatch, manual_doc):
        calls = []

        def counting(document, pin=None):
            calls.append(document)
            return validate_input(document, pin)
        monkeypatch.setattr(cli, "validate_input", counting)
        out = io.StringIO()
        assert run("123456", manual_doc, fingerprint=True, as_json=True, out=out) == 0
        assert len(calls) == 1
        assert json.loads(out.getvalue())["fingerprint"] == get_fingerprint("123456", manual_doc)

    def test_legacy_validates_once(self, monkeypatch, manual_doc):
        calls = []

        def counting(document, pin=None):
            calls.append(document)
            return validate_input(document, pin)
        monkeypatch.setattr(cli, "validate_input", counting)
        out = io.StringIO()
        assert run("123456", manual_doc, legacy=True, out=out) == 0
        assert len(calls) == 1
        assert out.getvalue().strip() == legacy_mnemonic("123456", manual_doc)


def _answers(*values):
    """Fake input(): returns the given answers in order and records the prompts."""
    prompts = []
    it = iter(values)

    def ask(prompt):
        prompts.append(prompt)
        return next(it)
    ask.prompts = prompts
    return ask


class TestPrompt:

    def test_manual_entry(self, capsys):
        answers = ["n", "ERIKA", " MUSTERMANN "] + [""] * 21 + ["sol", "24"]
        ask = _answers(*answers)
        pin, document, options = prompt_document(ask=ask, ask_secret=lambda p: " 123456 ")
        assert pin == "123456"
        assert document == {"names": "ERIKA", "surname": "MUSTERMANN"}
        assert options == {"chain": "SOL", "words": "24"}
        assert ask.prompts[1] == "Given names: "
        assert ask.prompts[-1] == "Sentence length ([12]/18/24): "

    def test_mrz_entry(self, capsys, type3_rows):
        ask = _answers("y", type3_rows["row1"], type3_rows["row2"], "", "", "")
        pin, document, options = prompt_document(ask=ask, ask_secret=lambda p: "1234")
        assert document == type3_rows
        assert options == {"chain": "ETH", "words": "12"}
        assert ask.prompts[1:4] == ["MRZ row1: ", "MRZ row2: ", "MRZ row3: "]
