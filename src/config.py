import os
import logging
from pathlib import Path

import yaml
from dotenv import load_dotenv

log = logging.getLogger("cubetimer.config")

# Project root is one level up from src/
PROJECT_ROOT = Path(__file__).resolve().parent.parent
CONFIG_DIR = PROJECT_ROOT / "config"

DEFAULTS = {
    "timer": {"tick_ms": 10},
    "storage": {"path": "~/.local/share/cubetimer/solves.json", "key": "rubiksSolves"},
    "display": {"fps": 30, "frame_path": None, "history_limit": 50},
    "osc": {"listen_host": "0.0.0.0", "listen_port": 9100,
            "display_ip": None, "display_port": 9101},
    "confirm": {"window_s": 3.0},
}


def load_config(config_path: str = None) -> dict:
    """Load configuration from YAML file with .env overrides."""
    load_dotenv(PROJECT_ROOT / ".env")

    yaml_path = Path(config_path) if config_path else CONFIG_DIR / "default_settings.yaml"
    if not yaml_path.exists():
        log.warning("Config file not found: %s, using defaults", yaml_path)
        loaded = {}
    else:
        with open(yaml_path) as f:
            loaded = yaml.safe_load(f) or {}

    config = {section: {**values, **(loaded.get(section) or {})}
              for section, values in DEFAULTS.items()}

    timer = config["timer"]
    timer["tick_ms"] = int(os.environ.get("TIMER_TICK_MS", timer["tick_ms"]))

    storage = config["storage"]
    storage["path"] = os.environ.get("CUBETIMER_STORE_PATH", storage["path"])
    storage["key"] = os.environ.get("CUBETIMER_STORE_KEY", storage["key"])

    display = config["display"]
    display["fps"] = int(os.environ.get("DISPLAY_FPS", display["fps"]))
    display["frame_path"] = os.environ.get("FRAME_PATH", display["frame_path"]) or None

    osc = config["osc"]
    osc["listen_port"] = int(os.environ.get("OSC_LISTEN_PORT", osc["listen_port"]))
    osc["display_ip"] = os.environ.get("OSC_DISPLAY_IP", osc["display_ip"]) or None
    osc["display_port"] = int(os.environ.get("OSC_DISPLAY_PORT", osc["display_port"]))

    log.info(
        "Config loaded: store %s, OSC listen on :%d, tick %d ms, display %d fps",
        storage["path"],
        osc["listen_port"],
        timer["tick_ms"],
        display["fps"],
    )
    return config
