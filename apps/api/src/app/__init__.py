"""School management API."""
