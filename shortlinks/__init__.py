"""URL shortener with atomic click counting."""
