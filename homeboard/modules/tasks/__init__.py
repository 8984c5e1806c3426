"""Tasks module: task lifecycle, permissions and status transitions."""
