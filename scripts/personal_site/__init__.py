"""Publication pipeline and display formatting for the site builder."""
