"""HTML markup for a DashboardView. Element ids match the page contract the stylesheet relies on."""

import html

from dashboard.view import EMPTY_MESSAGE, DashboardView, PlaylistCard, UserHeader

MUSIC_ICON = (
    '<svg xmlns="http://www.w3.org/2000/svg" width="48" height="48" viewBox="0 0 24 24" fill="none" '
    'stroke="currentColor" stroke-width="2" stroke-linecap="round" stroke-linejoin="round">'
    '<path d="M9 18V5l12-2v13"/><circle cx="6" cy="18" r="3"/><circle cx="18" cy="16" r="3"/>'
    "</svg>"
)

HIDDEN = ' style="display:none"'


def escape_html(text) -> str:
    """Escape &, <, >, " and ' so upstream text can't inject markup."""
    return html.escape("" if text is None else str(text), quote=True)


def render_header(header: UserHeader | None) -> str:
    if header is None:
        return (
            f'<img id="user-avatar" class="user-avatar" alt=""{HIDDEN}>'
            '<h1 id="user-name" class="user-name"></h1>'
            '<p id="playlist-count" class="playlist-count"></p>'
        )
    if header.avatar_url:
        avatar = f'<img id="user-avatar" class="user-avatar" src="{escape_html(header.avatar_url)}" alt="" style="display:block">'
    else:
        avatar = f'<img id="user-avatar" class="user-avatar" alt=""{HIDDEN}>'
    return (
        f"{avatar}"
        f'<h1 id="user-name" class="user-name">{escape_html(header.name)}</h1>'
        f'<p id="playlist-count" class="playlist-count">{escape_html(header.playlist_count)}</p>'
    )


def render_card(card: PlaylistCard) -> str:
    name = escape_html(card.name)
    if card.image_url:
        image = f'<img src="{escape_html(card.image_url)}" alt="{name}" class="playlist-image">'
    else:
        image = f'<div class="playlist-image-placeholder">{MUSIC_ICON}</div>'
    return (
        f'<a href="{escape_html(card.href)}" target="_blank" rel="noopener" class="playlist-card">'
        f'<div class="playlist-image-container">{image}</div>'
        '<div class="playlist-info">'
        f'<div class="playlist-name">{name}</div>'
        f'<div class="playlist-tracks">{escape_html(card.tracks)}</div>'
        "</div>"
        "</a>"
    )


def render_grid(view: DashboardView) -> str:
    if view.is_empty:
        body = f'<div class="empty-state">{MUSIC_ICON}<p>{escape_html(EMPTY_MESSAGE)}</p></div>'
    else:
        body = "".join(render_card(c) for c in view.cards)
    return f'<div id="playlists-grid" class="playlists-grid">{body}</div>'


def render_body(view: DashboardView) -> str:
    """Both sections are always present; the inactive one is hidden."""
    dashboard_style = ' style="display:block"' if view.state == "dashboard" else HIDDEN
    error_style = ' style="display:flex"' if view.state == "error" else HIDDEN
    return (
        f'<section id="dashboard-section" class="dashboard-section"{dashboard_style}>'
        f'<header class="user-header">{render_header(view.header)}</header>'
        f"{render_grid(view)}"
        "</section>"
        f'<section id="error-section" class="error-section"{error_style}>'
        f'<p id="error-message" class="error-message">{escape_html(view.error_message)}</p>'
        '<form method="get" action="/"><button id="retry-btn" type="submit">Try again</button></form>'
        "</section>"
    )


def render_page(view: DashboardView, title: str = "My Spotify Playlists") -> str:
    return f"""<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>{escape_html(title)}</title>
  </head>
  <body>
    <main class="container">{render_body(view)}</main>
  </body>
</html>
"""
