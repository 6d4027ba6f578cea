"""GabAi backend application."""
