"""Host surfaces: REST API and terminal CLI."""
