"""PicoRaster desktop app and command line."""
