"""Currency converter client: live-rate conversions with a bounded, persisted history."""

__version__ = "0.1.0"
