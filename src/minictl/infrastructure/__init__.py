"""Infrastructure layer: cluster backends, file and environment I/O."""
