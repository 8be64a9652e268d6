"""Resource modules."""
