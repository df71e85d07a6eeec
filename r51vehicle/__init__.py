"""State tracking, control frames and routing rules for the R51 vehicle CAN bus."""

__version__ = "0.1.0"
__all__ = [
    "audio",
    "bcm",
    "climate",
    "climate_events",
    "climate_frames",
    "core",
    "ecm",
    "ipdm",
    "momentary_output",
    "routing",
    "screen",
    "settings",
    "settings_sequence",
]