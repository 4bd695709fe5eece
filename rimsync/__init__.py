"""rimsync - download the workshop mods a RimWorld save needs."""

__version__ = "0.1.0"
