"""Business profile API and field-by-field profile editor."""
