import unittest

from dashboard.view import (
    ERROR_MESSAGE,
    NO_LINK,
    PlaylistCard,
    build_card,
    build_header,
    build_view,
    error_view,
    pluralize,
)

USER = {"id": "u1", "display_name": "Ann", "images": []}
PLAYLISTS = {
    "total": 2,
    "items": [
        {"name": "A", "tracks": {"total": 5}, "images": [], "external_urls": {}},
        {"name": "B", "tracks": {"total": 1}, "images": [{"url": "https://i.scdn.co/b.jpg"}],
         "external_urls": {"spotify": "https://open.spotify.com/playlist/b"}},
    ],
}


class TestPluralize(unittest.TestCase):
    def test_forms(self):
        self.assertEqual(pluralize(0, "track"), "0 tracks")
        self.assertEqual(pluralize(1, "track"), "1 track")
        self.assertEqual(pluralize(2, "playlist"), "2 playlists")


class TestHeader(unittest.TestCase):
    def test_display_name_and_no_avatar(self):
        header = build_header(USER, 2)
        self.assertEqual(header.name, "Ann")
        self.assertEqual(header.playlist_count, "2 playlists")
        self.assertIsNone(header.avatar_url)

    def test_falls_back_to_id(self):
        header = build_header({"id": "u1", "display_name": None}, 1)
        self.assertEqual(header.name, "u1")
        self.assertEqual(header.playlist_count, "1 playlist")

    def test_first_image_is_avatar(self):
        user = {"id": "u1", "images": [{"url": "https://i.scdn.co/1.jpg"}, {"url": "https://i.scdn.co/2.jpg"}]}
        self.assertEqual(build_header(user, 0).avatar_url, "https://i.scdn.co/1.jpg")


class TestCards(unittest.TestCase):
    def test_card_without_link_or_image(self):
        card = build_card(PLAYLISTS["items"][0])
        self.assertEqual(card, PlaylistCard(name="A", tracks="5 tracks", href=NO_LINK, image_url=None))

    def test_card_with_link_and_image(self):
        card = build_card(PLAYLISTS["items"][1])
        self.assertEqual(card.tracks, "1 track")
        self.assertEqual(card.href, "https://open.spotify.com/playlist/b")
        self.assertEqual(card.image_url, "https://i.scdn.co/b.jpg")

    def test_missing_track_count_is_zero(self):
        self.assertEqual(build_card({"name": "X"}).tracks, "0 tracks")


class TestBuildView(unittest.TestCase):
    def test_end_to_end(self):
        view = build_view(USER, PLAYLISTS)
        self.assertEqual(view.state, "dashboard")
        self.assertEqual(view.header.name, "Ann")
        self.assertEqual(view.header.playlist_count, "2 playlists")
        self.assertEqual(len(view.cards), 2)
        self.assertEqual(view.cards[0].tracks, "5 tracks")
        self.assertFalse(view.is_empty)

    def test_empty_collection(self):
        view = build_view(USER, {"total": 0, "items": []})
        self.assertTrue(view.is_empty)
        self.assertEqual(view.header.playlist_count, "0 playlists")

    def test_absent_items(self):
        self.assertTrue(build_view(USER, {"total": 0}).is_empty)

    def test_error_state(self):
        view = error_view()
        self.assertEqual(view.state, "error")
        self.assertEqual(view.error_message, ERROR_MESSAGE)
        self.assertIsNone(view.header)
        self.assertFalse(view.is_empty)

    def test_to_dict_visibility(self):
        data = build_view(USER, PLAYLISTS).to_dict()
        self.assertTrue(data["dashboard_visible"])
        self.assertFalse(data["error_visible"])
        self.assertEqual(data["header"]["name"], "Ann")
        self.assertEqual([c["name"] for c in data["cards"]], ["A", "B"])

        data = error_view().to_dict()
        self.assertFalse(data["dashboard_visible"])
        self.assertTrue(data["error_visible"])
        self.assertIsNone(data["header"])


if __name__ == "__main__":
    unittest.main(verbosity=2)
