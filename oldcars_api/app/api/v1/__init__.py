"""Version 1 of the Old Cars API."""
