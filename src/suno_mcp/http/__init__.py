"""HTTP access to the upstream Suno API."""
