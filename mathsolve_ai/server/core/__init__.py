"""Server configuration and API constants."""
