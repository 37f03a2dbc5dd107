"""
CLI Tests
=========

Tests for the m6502run and m6502dis command-line tools.

Copyright (c) 2026 MOS6502 Emulator Contributors
"""

import pytest
import click
from click.testing import CliRunner

from mos6502 import __version__
from mos6502.cli.errors import ExitCode, exit_code_for
from mos6502.cli.m6502dis import main as dis_main
from mos6502.cli.m6502run import format_registers, main as run_main
from mos6502.emulator import CPUState
from mos6502.errors import AddressParseError, EmulatorStateError


@pytest.fixture
def runner():
    return CliRunner()


class TestFormatRegisters:
    """Test the register summary."""

    def test_format(self):
        """Two lines: registers, then flags and cycles."""
        state = CPUState(a=0x15, x=0x01, y=0x00, sp=0xFA, p=0x24, pc=0x9000, cycles=15)
        assert format_registers(state) == (
            "A=$15 X=$01 Y=$00 SP=$FA PC=$9000 P=$24\n"
            "Flags: NV-BDIZC ..-..I..  Cycles: 15"
        )


class TestRunCommand:
    """Test m6502run."""

    def test_sample_program(self, runner):
        """LDA/ADC/INX/BRK for four steps."""
        result = runner.invoke(run_main, ["A9 10 69 05 E8 00", "--steps", "4"])
        assert result.exit_code == ExitCode.SUCCESS
        assert "A=$15 X=$01" in result.output
        assert "Cycles: 15" in result.output

    def test_origin(self, runner):
        """LDX #$FF at $0000."""
        result = runner.invoke(run_main, ["A2 FF", "--origin", "0x0000", "-n", "1"])
        assert result.exit_code == 0
        assert "X=$FF" in result.output
        assert "PC=$0002" in result.output
        assert "Flags: NV-BDIZC N.-..I.." in result.output

    def test_dollar_origin(self, runner):
        """$-prefixed origins are accepted."""
        result = runner.invoke(run_main, ["EA", "-o", "$C000", "-n", "1"])
        assert result.exit_code == 0
        assert "PC=$C001" in result.output

    def test_zero_steps(self, runner):
        """--steps 0 shows the reset state."""
        result = runner.invoke(run_main, ["EA", "-n", "0"])
        assert result.exit_code == 0
        assert "PC=$8000" in result.output
        assert "SP=$FD" in result.output

    def test_trace(self, runner):
        """--trace prints each instruction."""
        result = runner.invoke(run_main, ["A9 10 69 05", "-n", "2", "--trace"])
        assert result.exit_code == 0
        assert "$8000: A9 10     LDA #$10" in result.output
        assert "$8002: 69 05     ADC #$05" in result.output

    def test_bad_hex(self, runner):
        """Malformed program text is an argument error."""
        result = runner.invoke(run_main, ["A9 ZZ"])
        assert result.exit_code == ExitCode.INVALID_ARGS
        assert "not hex" in result.output

    def test_bad_origin(self, runner):
        """Out-of-range origin is an argument error."""
        result = runner.invoke(run_main, ["EA", "--origin", "0x10000"])
        assert result.exit_code == ExitCode.INVALID_ARGS
        assert "origin" in result.output

    def test_negative_steps(self, runner):
        """Negative step counts are rejected by click."""
        result = runner.invoke(run_main, ["EA", "--steps", "-1"])
        assert result.exit_code == 2

    def test_version(self, runner):
        """--version prints the package version."""
        result = runner.invoke(run_main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output
        assert "m6502run" in result.output


class TestDisassembleCommand:
    """Test m6502dis."""

    def test_listing(self, runner):
        """Lists every instruction."""
        result = runner.invoke(dis_main, ["A9 10 69 05 E8 00", "--address", "0x8000"])
        assert result.exit_code == 0
        lines = result.output.strip().splitlines()
        assert len(lines) == 4
        assert lines[0] == "$8000: A9 10     LDA #$10"
        assert lines[3].startswith("$8005: 00")

    def test_count(self, runner):
        """--count limits the listing."""
        result = runner.invoke(dis_main, ["EA EA EA EA", "-c", "2"])
        assert result.exit_code == 0
        assert len(result.output.strip().splitlines()) == 2

    def test_no_bytes(self, runner):
        """--no-bytes drops the raw bytes column."""
        result = runner.invoke(dis_main, ["20 00 90", "-a", "$8000", "--no-bytes"])
        assert result.exit_code == 0
        assert result.output.strip() == "$8000: JSR $9000"

    def test_symbols(self, runner):
        """Vector symbols are shown unless disabled."""
        code = "6C FC FF"
        with_symbols = runner.invoke(dis_main, [code])
        assert "RESET_VECTOR" in with_symbols.output
        without = runner.invoke(dis_main, [code, "--no-symbols"])
        assert "RESET_VECTOR" not in without.output

    def test_bad_address(self, runner):
        """Malformed address is an argument error."""
        result = runner.invoke(dis_main, ["EA", "--address", "nope"])
        assert result.exit_code == ExitCode.INVALID_ARGS

    def test_version(self, runner):
        """--version prints the program name."""
        result = runner.invoke(dis_main, ["--version"])
        assert result.exit_code == 0
        assert "m6502dis" in result.output


class TestExitCodes:
    """Test exception to exit-code mapping."""

    @pytest.mark.parametrize("error,code", [
        (AddressParseError("origin", "zz", "bad"), ExitCode.INVALID_ARGS),
        (click.BadParameter("bad"), ExitCode.INVALID_ARGS),
        (EmulatorStateError("busy"), ExitCode.RUN_ERROR),
        (RuntimeError("boom"), ExitCode.INTERNAL_ERROR),
    ])
    def test_exit_code_for(self, error, code):
        """Package errors, argument errors and bugs get distinct codes."""
        assert exit_code_for(error) == code
