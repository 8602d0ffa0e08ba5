"""
End-to-end tests for the tfvar command line entry point.
"""

import logging
import os
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from tfvar.main import get_arguments, main

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"

CLEAN_ENV = {
    key: value
    for key, value in os.environ.items()
    if not key.startswith(("TF_VAR_", "TFVAR_"))
}


@pytest.fixture(autouse=True)
def clean_environment():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    with patch.dict(os.environ, CLEAN_ENV, clear=True):
        yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
    root.setLevel(level)


class TestGetArguments:
    def test_defaults(self):
        args = get_arguments([])

        assert args.dir == "."
        assert args.env_var is False
        assert args.var is None
        assert args.loglevel is None

    def test_repeated_options(self):
        args = get_arguments(["infra", "--var", "a=1", "--var", "b=2", "--var-file", "x.tfvars"])

        assert args.dir == "infra"
        assert args.var == ["a=1", "b=2"]
        assert args.var_file == ["x.tfvars"]


class TestMain:
    def test_tfvars_output(self, capsys):
        exit_code = main([str(FIXTURES_DIR / "defaults")])

        assert exit_code == 0
        assert capsys.readouterr().out == (
            'availability_zone_names = ["us-west-1a"]\n'
            'instance_name           = "my-instance"\n'
            "region                  = null\n"
        )

    def test_env_var_output(self, capsys):
        exit_code = main([str(FIXTURES_DIR / "normal"), "--env-var"])

        assert exit_code == 0
        assert capsys.readouterr().out == (
            "export TF_VAR_instance_name='my-instance'\n"
            "export TF_VAR_resource_name=''\n"
        )

    def test_header_and_descriptions(self, capsys):
        exit_code = main(
            [str(FIXTURES_DIR / "normal"), "--descriptions", "--header", "# generated"]
        )

        assert exit_code == 0
        assert capsys.readouterr().out == (
            "# generated\n"
            "\n"
            "## OPTIONAL\n"
            '# instance_name = "my-instance"\n'
            "\n"
            "## REQUIRED\n"
            "resource_name = null\n"
            "\n"
        )

    def test_output_file(self, tmp_path, capsys):
        output_file = tmp_path / "out" / "terraform.tfvars"

        exit_code = main([str(FIXTURES_DIR / "normal"), "--output", str(output_file)])

        assert exit_code == 0
        assert capsys.readouterr().out == ""
        assert output_file.read_text(encoding="utf-8") == (
            'instance_name = "my-instance"\n'
            "resource_name = null\n"
        )

    def test_ignore_default(self, capsys):
        exit_code = main([str(FIXTURES_DIR / "normal"), "--ignore-default"])

        assert exit_code == 0
        assert capsys.readouterr().out == (
            "instance_name = null\n"
            "resource_name = null\n"
        )

    def test_auto_assign(self, capsys):
        env = {"TF_VAR_region": "eu-west-1", "TF_VAR_zones": '["a", "b"]'}

        with patch.dict(os.environ, env):
            exit_code = main([str(FIXTURES_DIR / "auto_assign"), "--auto-assign"])

        assert exit_code == 0
        assert capsys.readouterr().out == (
            "instance_count = 5\n"
            'region         = "us-west-2"\n'
            'zones          = ["a", "b"]\n'
        )

    def test_var_overrides_auto_assign(self, capsys):
        exit_code = main(
            [
                str(FIXTURES_DIR / "auto_assign"),
                "--auto-assign",
                "--var",
                "instance_count=7",
                "--var",
                "region=ap-northeast-1",
            ]
        )

        assert exit_code == 0
        assert capsys.readouterr().out == (
            "instance_count = 7\n"
            'region         = "ap-northeast-1"\n'
            "zones          = null\n"
        )

    def test_exponent_var_for_number_variable(self, capsys):
        exit_code = main([str(FIXTURES_DIR / "auto_assign"), "--var", "instance_count=1e3"])

        assert exit_code == 0
        assert "instance_count = 1000\n" in capsys.readouterr().out

    def test_write_failure_is_reported_as_write_error(self, capsys):
        stream = MagicMock()
        stream.flush.side_effect = OSError(28, "No space left on device")

        with patch("tfvar.main.sys.stdout", stream):
            exit_code = main([str(FIXTURES_DIR / "normal")])

        assert exit_code == 1
        assert "failed to write as tfvars" in capsys.readouterr().err

    def test_var_file(self, tmp_path, capsys):
        var_file = tmp_path / "custom.tfvars"
        var_file.write_text('region = "sa-east-1"\n', encoding="utf-8")

        exit_code = main([str(FIXTURES_DIR / "auto_assign"), "--var-file", str(var_file)])

        assert exit_code == 0
        assert 'region         = "sa-east-1"\n' in capsys.readouterr().out

    def test_invalid_value(self, capsys):
        exit_code = main([str(FIXTURES_DIR / "auto_assign"), "--var", "instance_count=[1"])

        assert exit_code == 1
        assert capsys.readouterr().out == ""

    def test_bad_configuration(self, capsys):
        exit_code = main([str(FIXTURES_DIR / "bad")])

        captured = capsys.readouterr()
        assert exit_code == 1
        assert captured.out == ""
        assert "loading config" in captured.err

    def test_missing_directory(self, tmp_path):
        assert main([str(tmp_path / "missing")]) == 1

    def test_debug_writes_variables_csv(self, tmp_path, capsys):
        debug_dir = tmp_path / "debug"

        exit_code = main([str(FIXTURES_DIR / "normal"), "--debug", "--debug-dir", str(debug_dir)])

        assert exit_code == 0
        assert (debug_dir / "variables.csv").is_file()
