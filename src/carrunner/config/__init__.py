"""Configuration for the car runner."""

from carrunner.config.settings import DisplaySettings, SimulatorSettings, Settings, get_settings

__all__ = ["DisplaySettings", "SimulatorSettings", "Settings", "get_settings"]
