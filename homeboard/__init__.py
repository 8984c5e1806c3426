"""homeboard - shared household task management API."""
