"""Categories module: house-scoped task categories."""
