"""Declarative dashboard view built from the gateway's user and playlist payloads. No I/O here."""

from dataclasses import dataclass, field
from typing import Any

DASHBOARD = "dashboard"
ERROR = "error"

ERROR_MESSAGE = "Unable to load playlists. Please try again later."
EMPTY_MESSAGE = "No playlists yet."
NO_LINK = "#"


def pluralize(count: int, noun: str) -> str:
    """'1 track', '0 tracks', '2 tracks'."""
    return f"{count} {noun}{'' if count == 1 else 's'}"


def first_image_url(obj: dict[str, Any]) -> str | None:
    images = obj.get("images") or []
    if not images or not isinstance(images[0], dict):
        return None
    return images[0].get("url") or None


@dataclass
class UserHeader:
    name: str
    playlist_count: str
    avatar_url: str | None = None  # None = avatar hidden


@dataclass
class PlaylistCard:
    name: str
    tracks: str
    href: str = NO_LINK
    image_url: str | None = None  # None = placeholder icon


@dataclass
class DashboardView:
    """Exactly one of the two sections is visible, picked by state."""

    state: str
    header: UserHeader | None = None
    cards: list[PlaylistCard] = field(default_factory=list)
    error_message: str = ""

    @property
    def is_empty(self) -> bool:
        """Dashboard with nothing to show: the grid renders the empty-state placeholder."""
        return self.state == DASHBOARD and not self.cards

    def to_dict(self) -> dict:
        return {
            "state": self.state,
            "dashboard_visible": self.state == DASHBOARD,
            "error_visible": self.state == ERROR,
            "header": None if self.header is None else {
                "name": self.header.name,
                "playlist_count": self.header.playlist_count,
                "avatar_url": self.header.avatar_url,
            },
            "empty": self.is_empty,
            "cards": [
                {
                    "name": c.name,
                    "tracks": c.tracks,
                    "href": c.href,
                    "image_url": c.image_url,
                }
                for c in self.cards
            ],
            "error_message": self.error_message,
        }


def build_header(user: dict[str, Any], total_playlists: int) -> UserHeader:
    return UserHeader(
        name=str(user.get("display_name") or user.get("id") or ""),
        playlist_count=pluralize(total_playlists, "playlist"),
        avatar_url=first_image_url(user),
    )


def build_card(playlist: dict[str, Any]) -> PlaylistCard:
    track_count = (playlist.get("tracks") or {}).get("total") or 0
    return PlaylistCard(
        name=str(playlist.get("name") or ""),
        tracks=pluralize(int(track_count), "track"),
        href=(playlist.get("external_urls") or {}).get("spotify") or NO_LINK,
        image_url=first_image_url(playlist),
    )


def build_view(
    user: dict[str, Any] | None,
    playlists: dict[str, Any] | None,
    state: str = DASHBOARD,
    error_message: str = ERROR_MESSAGE,
) -> DashboardView:
    """Map (user, playlists, state) to what the page should show."""
    if state == ERROR:
        return DashboardView(state=ERROR, error_message=error_message)

    playlists = playlists or {}
    items = [p for p in (playlists.get("items") or []) if isinstance(p, dict)]
    total = playlists.get("total")
    if total is None:
        total = len(items)
    return DashboardView(
        state=DASHBOARD,
        header=build_header(user or {}, int(total)),
        cards=[build_card(p) for p in items],
    )


def error_view(message: str = ERROR_MESSAGE) -> DashboardView:
    return build_view(None, None, state=ERROR, error_message=message)
