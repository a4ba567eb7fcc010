"""HTTP blueprints for the SpendTrack JSON API."""
