"""Application layer - use cases built on domain ports."""
