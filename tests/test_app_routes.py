import os
import sys
import unittest


ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SRC = os.path.join(ROOT, "src")
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)
if SRC not in sys.path:
    sys.path.insert(0, SRC)

os.environ.setdefault("OPTPAGES_NONCE_SECRET", "test-secret")
os.environ.pop("OPTPAGES_CONFIG", None)

from fastapi.testclient import TestClient

from app import main


class TestApp(unittest.TestCase):
    def setUp(self) -> None:
        main.pages.clear()
        main.boxes.clear()
        main.hooks.clear()
        main.meta_boxes.clear()
        self.client = TestClient(main.app)

    def test_health(self) -> None:
        res = self.client.get("/health")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json(), {"ok": True})

    def test_render_registered_page(self) -> None:
        main.register_options_page("my-page", "opts1", {"title": "My Settings"})
        res = self.client.get("/options/my-page")
        self.assertEqual(res.status_code, 200)
        self.assertIn("text/html", res.headers["content-type"])
        self.assertIn('<div class="wrap cmb2-options-page options-opts1">', res.text)
        self.assertIn("My Settings", res.text)

    def test_render_post_page_with_meta_box(self) -> None:
        main.register_options_page("post-page", "opts2", {"page_format": "post", "page_columns": 2})
        main.meta_boxes.add_meta_box("side_box", "Side", lambda obj, box: "<p>side</p>", "post-page", "side")
        res = self.client.get("/options/post-page")
        self.assertEqual(res.status_code, 200)
        self.assertIn("<p>side</p>", res.text)
        self.assertIn("meta-box-order-nonce", res.text)

    def test_unknown_page(self) -> None:
        res = self.client.get("/options/missing")
        self.assertEqual(res.status_code, 404)
        body = res.json()
        self.assertFalse(body["ok"])
        self.assertEqual(body["errors"][0]["code"], "PAGE_NOT_FOUND")

    def test_list_pages_by_option_key(self) -> None:
        main.register_options_page("general", "group1", {})
        main.register_options_page("advanced", "group1", {})
        main.register_options_page("other", "group2", {})
        res = self.client.get("/options", params={"option_key": "group1"})
        ids = sorted(page["page_id"] for page in res.json()["pages"])
        self.assertEqual(ids, ["advanced", "general"])
        res = self.client.get("/options")
        self.assertEqual(len(res.json()["pages"]), 3)

    def test_load_config(self) -> None:
        counts = main.load_config(
            {
                "pages": [{"page_id": "cfg", "option_key": "cfg_opts", "props": {"title": "Cfg"}}, {"page_id": 3}],
                "boxes": [{"id": "cfg_box", "show_in_rest": True}, {"title": "no id"}],
            }
        )
        self.assertEqual(counts, {"pages": 1, "boxes": 1})
        self.assertIsNotNone(main.pages.get("cfg"))

    def test_boxes_empty_is_forbidden(self) -> None:
        res = self.client.get("/cmb2/v1/boxes")
        self.assertEqual(res.status_code, 403)
        self.assertEqual(res.json()["errors"][0]["code"], "cmb2_rest_no_boxes")

    def test_boxes_lists_readable_only(self) -> None:
        main.boxes.register({"id": "public", "title": "Public", "show_in_rest": True, "fields": [{"id": "f"}]})
        main.boxes.register({"id": "private", "title": "Private"})
        res = self.client.get("/cmb2/v1/boxes")
        self.assertEqual(res.status_code, 200)
        data = res.json()
        self.assertEqual(list(data), ["public"])
        self.assertNotIn("fields", data["public"])
        self.assertEqual(
            data["public"]["_links"]["collection"],
            [{"href": "http://testserver/cmb2/v1/boxes"}],
        )

    def test_single_box(self) -> None:
        main.boxes.register({"id": "public", "title": "Public", "show_in_rest": True})
        main.boxes.register({"id": "private", "title": "Private"})
        res = self.client.get("/cmb2/v1/boxes/public")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()["_links"]["self"], [{"href": "http://testserver/cmb2/v1/boxes/public"}])
        res = self.client.get("/cmb2/v1/boxes/private")
        self.assertEqual(res.status_code, 404)
        self.assertEqual(res.json()["errors"][0]["code"], "cmb2_rest_box_not_found")


if __name__ == "__main__":
    unittest.main()
