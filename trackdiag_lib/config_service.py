# --- trackdiag_lib/config_service.py ---
import configparser
import logging
import os

from .layout import DEFAULT_LABELS, DEFAULT_STYLES

log = logging.getLogger("trackdiag.config")

DEFAULT_CONFIG_PATH = os.path.join(os.path.expanduser("~"), ".trackdiag", "trackdiag.cfg")


class ConfigService:
    """Manages reading from and writing to the trackdiag.cfg file."""

    def __init__(self, config_path: str = DEFAULT_CONFIG_PATH):
        self.config_path = config_path
        self.defaults = {
            "Style": dict(DEFAULT_STYLES),
            "Labels": dict(DEFAULT_LABELS),
            "Output": {"basename": "track-diagram"},
        }

    def get_settings(self) -> dict:
        """Reads settings from the config file, applying defaults if missing."""
        config = configparser.ConfigParser(interpolation=None)
        for section, values in self.defaults.items():
            config[section] = values

        if not config.read(self.config_path):
            log.info("Config file not found at %s. Creating with defaults.", self.config_path)
            self.save_settings(self._config_to_dict(config))

        return self._config_to_dict(config)

    def save_settings(self, settings: dict):
        """Saves a dictionary of settings to the config file."""
        config = configparser.ConfigParser(interpolation=None)
        for section, values in settings.items():
            config[section] = {k: str(v) for k, v in values.items()}

        try:
            config_dir = os.path.dirname(self.config_path)
            if config_dir:
                os.makedirs(config_dir, exist_ok=True)
            with open(self.config_path, "w") as configfile:
                config.write(configfile)
            log.info("Settings successfully saved to %s", self.config_path)
        except OSError as e:
            log.error("Failed to write settings to %s: %s", self.config_path, e)

    @property
    def styles(self) -> dict:
        return self.get_settings()["Style"]

    @property
    def labels(self) -> dict:
        return self.get_settings()["Labels"]

    def _config_to_dict(self, config: configparser.ConfigParser) -> dict:
        """Converts a ConfigParser object to a nested dictionary."""
        return {s: dict(config.items(s)) for s in config.sections()}
