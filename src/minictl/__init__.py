"""minictl — shared mini cluster fixture control for builds."""

__version__ = "0.3.0"
