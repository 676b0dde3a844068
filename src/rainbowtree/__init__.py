"""Rainbow-coloured, interruptible relay of a directory tree listing."""

__version__ = "0.1.0"
