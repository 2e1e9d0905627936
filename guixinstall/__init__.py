"""Building blocks for installing Guix System: configuration, commands, disks and hardware checks."""

__version__ = "0.1.0"