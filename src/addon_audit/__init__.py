"""Add-on usage audit package."""

from .analysis import perform_analysis
from .catalog import load_catalog, parse_catalog
from .models import Addon, AddonAnalysis, LocalAddon, Preset, RemoteAddon
from .presets import load_presets, parse_preset
from .report import create_report

__all__ = [
    "Addon",
    "AddonAnalysis",
    "LocalAddon",
    "Preset",
    "RemoteAddon",
    "create_report",
    "load_catalog",
    "load_presets",
    "parse_catalog",
    "parse_preset",
    "perform_analysis",
]
