"""Personal finance tracker API and client."""
