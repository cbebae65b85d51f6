"""srcmodel - cross-file structural model of Go source trees."""

__version__ = "0.1.0"
