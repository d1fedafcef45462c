"""Database models, session management and the content store."""
