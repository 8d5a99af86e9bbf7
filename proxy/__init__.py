"""Spotify proxy: refresh-token exchange, token cache and the public JSON gateway."""
