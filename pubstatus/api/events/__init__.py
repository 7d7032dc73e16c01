"""Build event intake resources."""
