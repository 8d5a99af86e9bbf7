"""Playlist dashboard: view model, HTML rendering and the page server."""

from dashboard.view import DashboardView, PlaylistCard, UserHeader, build_view, error_view

__all__ = ["DashboardView", "PlaylistCard", "UserHeader", "build_view", "error_view"]
