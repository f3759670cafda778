"""Customer automation flow engine."""
