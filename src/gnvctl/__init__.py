"""gnvctl: local and peer dependency manager layered on top of npm."""

__version__ = "0.1.0"
