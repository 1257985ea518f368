"""Core building blocks shared by the server: database, models, security and logging."""
