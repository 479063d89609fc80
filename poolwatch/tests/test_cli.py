"""
Tests for the command-line interface.
"""

from unittest.mock import AsyncMock, patch

import pytest

from poolwatch.cli import build_parser, main, validate_args
from poolwatch.errors import ConfigError


def parse(*argv):
    parser = build_parser()
    args = parser.parse_args(list(argv))
    validate_args(parser, args)
    return args


class TestArguments:
    """Argument parsing and validation."""

    def test_defaults(self):
        """Test every override defaults to the configuration value."""
        args = parse()

        assert args.pool is None
        assert args.router is None
        assert args.no_router is False
        assert args.no_pool is False
        assert args.poll_interval is None
        assert args.log_level is None

    def test_overrides(self):
        """Test explicit flags are parsed."""
        args = parse(
            "--pool", "0xB4e16d0168e52d35CaCD2c6185b44281Ec28C9Dc",
            "--no-router",
            "--poll-interval", "6",
            "--log-level", "DEBUG",
        )

        assert args.no_router is True
        assert args.poll_interval == 6.0
        assert args.log_level == "DEBUG"

    @pytest.mark.parametrize("argv", [
        ["--no-router", "--no-pool"],
        ["--pool", "0x1234"],
        ["--router", "not-an-address"],
        ["--poll-interval", "0"],
        ["--log-level", "TRACE"],
    ])
    def test_rejected(self, argv):
        """Test invalid combinations exit with a usage error."""
        with pytest.raises(SystemExit) as exc:
            parse(*argv)

        assert exc.value.code == 2


class TestMain:
    """Exit codes."""

    @pytest.mark.asyncio
    async def test_config_error_exit_code(self):
        """Test a configuration error exits with 2."""
        with patch("poolwatch.cli.run", new=AsyncMock(side_effect=ConfigError("bad"))):
            with pytest.raises(SystemExit) as exc:
                await main([])

        assert exc.value.code == 2

    @pytest.mark.asyncio
    async def test_interrupt_exit_code(self):
        """Test an interrupt exits with 130."""
        with patch("poolwatch.cli.run", new=AsyncMock(side_effect=KeyboardInterrupt())):
            with pytest.raises(SystemExit) as exc:
                await main([])

        assert exc.value.code == 130

    @pytest.mark.asyncio
    async def test_unexpected_error_exit_code(self):
        """Test any other failure exits with 1."""
        with patch("poolwatch.cli.run", new=AsyncMock(side_effect=RuntimeError("boom"))):
            with pytest.raises(SystemExit) as exc:
                await main([])

        assert exc.value.code == 1
