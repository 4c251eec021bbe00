"""Detection, version and composition phases."""
