"""Infrastructure layer: codecs, transports and event delivery."""
