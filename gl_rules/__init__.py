"""GL account allocation rules service."""
