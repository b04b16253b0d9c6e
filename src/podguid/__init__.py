"""podguid - browse Podigee podcasts and copy episode GUIDs."""

__version__ = "0.1.0"
