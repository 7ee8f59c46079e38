"""Event-driven TCP networking toolkit: schedulers, timers, buffers and connections."""

__version__ = "0.1.0"