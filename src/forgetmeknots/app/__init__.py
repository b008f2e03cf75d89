"""Application bootstrap: configuration and the Qt launcher."""
