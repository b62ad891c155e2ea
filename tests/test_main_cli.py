import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import main
from main import _parse_args


def test_default_command_invokes_serve() -> None:
    args = _parse_args([])
    assert args.command == "serve"
    assert args.port == 8000


def test_default_command_accepts_options_without_subcommand() -> None:
    args = _parse_args(["--host", "0.0.0.0", "--port", "8080"])
    assert args.command == "serve"
    assert args.host == "0.0.0.0"
    assert args.port == 8080


def test_main_passes_loaded_settings_to_server(monkeypatch, tmp_path) -> None:
    config = tmp_path / "users_api.yaml"
    config.write_text("environment: development\napi_tokens: [cli-token]\n", encoding="utf-8")
    for name in ("USERS_API_TOKENS", "USERS_API_ENV", "USERS_API_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)

    captured = {}

    def fake_serve(*, settings, host, port):
        captured.update({"settings": settings, "host": host, "port": port})

    monkeypatch.setattr(main, "_serve", fake_serve)
    main.main(["--config", str(config), "--port", "9001"])

    assert captured["port"] == 9001
    assert captured["host"] == "127.0.0.1"
    assert captured["settings"].api_tokens == ("cli-token",)
    assert captured["settings"].is_development
