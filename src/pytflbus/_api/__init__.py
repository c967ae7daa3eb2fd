"""TfL endpoint modules (internal)."""
