"""Tests for jigsaw.server.static — static file lookup."""

from jigsaw.server.static import StaticFiles


class TestStaticFiles:
    def test_serves_file(self, site) -> None:
        static = StaticFiles(site / "public")
        response = static.lookup("/site.css")
        assert response is not None
        assert response.status == 200
        assert "text/css" in response.content_type
        assert response.header("Cache-Control") == "public, max-age=3600"

    def test_missing_falls_through(self, site) -> None:
        assert StaticFiles(site / "public").lookup("/nope.css") is None

    def test_root_falls_through(self, site) -> None:
        assert StaticFiles(site / "public").lookup("/") is None

    def test_directory_falls_through(self, site) -> None:
        (site / "public" / "img").mkdir()
        assert StaticFiles(site / "public").lookup("/img") is None

    def test_prefix(self, site) -> None:
        static = StaticFiles(site / "public", prefix="/static")
        assert static.lookup("/static/site.css") is not None
        assert static.lookup("/site.css") is None

    def test_traversal_forbidden(self, site) -> None:
        (site / "secret.txt").write_text("secret")
        response = StaticFiles(site / "public").lookup("/../secret.txt")
        assert response is not None
        assert response.status == 403

    def test_unknown_type_is_octet_stream(self, site) -> None:
        (site / "public" / "blob.zzqq").write_bytes(b"\x00\x01")
        response = StaticFiles(site / "public").lookup("/blob.zzqq")
        assert response is not None
        assert response.content_type == "application/octet-stream"
        assert response.body == b"\x00\x01"
