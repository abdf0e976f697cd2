from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # --- app ---
    app_name: str = "System Monitor"
    debug: bool = False
    log_level: str = "INFO"

    # --- probe budgets (seconds) ---
    probe_timeout: float = 2.0
    static_probe_timeout: float = 5.0  # spawns lspci/lsblk/--version subprocesses
    network_probe_timeout: float = 5.0
    subprocess_timeout: float = 3.0
    snapshot_timeout: float = 10.0  # whole collect() run, enforced at the API/CLI edge

    # --- external ip lookup ---
    network_enabled: bool = True
    ip_echo_url: str = "https://api.ipify.org"

    # --- server ---
    host: str = "127.0.0.1"
    port: int = 8000
    cors_origins: list[str] = ["http://localhost:5173"]

    model_config = {"env_file": ".env", "env_prefix": "SYSMON_"}


settings = Settings()
