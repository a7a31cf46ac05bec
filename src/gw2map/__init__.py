"""gw2map -- GW2 world data as map layers, with live WvW objective state."""

__version__ = "0.1.0"
