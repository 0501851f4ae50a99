"""Pure types and algorithms with no I/O."""
