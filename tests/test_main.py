"""Tests for the command line entry point."""

from pathlib import Path
from unittest.mock import patch

import pytest

from rosa_mcp.__main__ import build_config, main, parse_args
from rosa_mcp.config import LogLevel, TransportMode


class TestBuildConfig:
    def test_flags(self) -> None:
        args = parse_args(
            [
                "--transport",
                "streamable-http",
                "--host",
                "0.0.0.0",
                "--port",
                "9000",
                "--ocm-base-url",
                "https://api.stage.openshift.com",
                "--ocm-client-id",
                "my-client",
                "--log-level",
                "DEBUG",
            ]
        )

        config = build_config(args)

        assert config.transport == TransportMode.STREAMABLE_HTTP
        assert config.host == "0.0.0.0"
        assert config.port == 9000
        assert config.ocm_base_url == "https://api.stage.openshift.com"
        assert config.ocm_client_id == "my-client"
        assert config.log_level == LogLevel.DEBUG

    def test_flags_override_file(self, tmp_path: Path) -> None:
        path = tmp_path / "rosa-mcp.toml"
        path.write_text('[server]\ntransport = "sse"\nport = 9000\n')

        config = build_config(parse_args(["--config", str(path), "--port", "9100"]))

        assert config.transport == TransportMode.SSE
        assert config.port == 9100

    def test_unknown_transport_rejected(self) -> None:
        with pytest.raises(SystemExit):
            parse_args(["--transport", "websocket"])


class TestMain:
    def test_runs_server(self) -> None:
        with patch("rosa_mcp.server.create_server") as mock_create:
            assert main(["--transport", "stdio"]) == 0

        config = mock_create.call_args.args[0]
        assert config.transport == TransportMode.STDIO
        mock_create.return_value.run.assert_called_once()

    def test_invalid_url_exits_with_error(self) -> None:
        with patch("rosa_mcp.server.create_server") as mock_create:
            assert main(["--ocm-base-url", "api.openshift.com"]) == 1
        mock_create.assert_not_called()

    def test_missing_config_file(self, tmp_path: Path) -> None:
        with patch("rosa_mcp.server.create_server") as mock_create:
            assert main(["--config", str(tmp_path / "absent.toml")]) == 1
        mock_create.assert_not_called()
