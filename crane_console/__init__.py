"""NiceGUI operator console for a three-axis crane positioning device."""

__version__ = "0.1.0"
