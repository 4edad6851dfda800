"""Tests for the command-line interface."""

from __future__ import annotations

from typer.testing import CliRunner

from cli import app

runner = CliRunner()


class TestSingleRuns:

    def test_accumulate_completed(self):
        result = runner.invoke(app, ["accumulate", "int8", "0", "25", "5"])
        assert result.exit_code == 0
        assert result.output.strip() == "value=125 completed=true applied=5"

    def test_accumulate_exhausted_exits_one(self):
        result = runner.invoke(app, ["accumulate", "int8", "0", "25", "6"])
        assert result.exit_code == 1
        assert "value=125 completed=false applied=5" in result.output

    def test_deplete(self):
        result = runner.invoke(app, ["deplete", "unsigned char", "255", "51", "5"])
        assert result.exit_code == 0
        assert "value=0 completed=true" in result.output

    def test_negative_values_after_separator(self):
        result = runner.invoke(app, ["accumulate", "--", "int8", "0", "-32", "4"])
        assert result.exit_code == 0
        assert "value=-128 completed=true" in result.output

    def test_unknown_domain(self):
        result = runner.invoke(app, ["accumulate", "int7", "0", "1", "1"])
        assert result.exit_code == 2
        assert "Unknown numeric domain" in result.output

    def test_unrepresentable_start(self):
        result = runner.invoke(app, ["accumulate", "int8", "300", "1", "1"])
        assert result.exit_code == 2
        assert "outside bounds" in result.output

    def test_nan_start_on_integer_type(self):
        result = runner.invoke(app, ["accumulate", "int8", "nan", "1", "1"])
        assert result.exit_code == 2
        assert "not a whole number" in result.output

    def test_fractional_step_on_integer_type(self):
        result = runner.invoke(app, ["accumulate", "int8", "0", "2.5", "3"])
        assert result.exit_code == 2
        assert "not a whole number" in result.output

    def test_nan_start_on_float_type(self):
        result = runner.invoke(app, ["deplete", "float64", "nan", "1", "1"])
        assert result.exit_code == 2
        assert "outside bounds" in result.output


class TestDemo:

    def test_demo_selected_domains(self):
        result = runner.invoke(app, ["demo", "--domain", "int8", "--width", "5"])
        assert result.exit_code == 0
        assert "Overflow Test of Type = int8" in result.output
        assert "*****\n" in result.output
        assert "Underflow Test of Type = unsigned char" not in result.output

    def test_demo_defaults(self):
        result = runner.invoke(app, ["demo"])
        assert result.exit_code == 0
        assert "Overflow Test of Type = long double" in result.output
        assert result.output.rstrip().endswith("All Numeric Underflow / Overflow Tests Complete!")

    def test_demo_bad_steps(self):
        result = runner.invoke(app, ["demo", "--steps", "0"])
        assert result.exit_code == 2


class TestInfoCommands:

    def test_domains(self):
        result = runner.invoke(app, ["domains"])
        assert result.exit_code == 0
        assert "int8: [-128, 127]" in result.output
        assert "unsigned char: [0, 255]" in result.output

    def test_verify(self):
        result = runner.invoke(app, ["verify", "tiny"])
        assert result.exit_code == 0
        assert "ALL PASSED" in result.output

    def test_verify_unknown(self):
        result = runner.invoke(app, ["verify", "nope"])
        assert result.exit_code == 2
