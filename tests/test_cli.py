from __future__ import annotations

from plasticmap.api.main import build_parser


def test_parser_defaults_point_at_plasticmap_config() -> None:
    parser = build_parser()
    args = parser.parse_args([])
    assert args.config == "config/plasticmap.json"
    assert args.host is None and args.port is None
    assert "pollution-severity" in parser.description
    assert "PLASTICMAP_" in parser.epilog


def test_host_and_port_overrides_are_parsed() -> None:
    args = build_parser().parse_args(["--host", "127.0.0.1", "--port", "9001"])
    assert (args.host, args.port) == ("127.0.0.1", 9001)
