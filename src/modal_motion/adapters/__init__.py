"""Host adapters for the motion engine."""
