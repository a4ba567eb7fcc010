"""Domain services used by the HTTP blueprints and the CLI."""
