import os
import sys
import unittest


ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SRC = os.path.join(ROOT, "src")
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from hook_dispatcher import HookDispatcher, HookError


class TestHookDispatcher(unittest.TestCase):
    def setUp(self) -> None:
        self.hooks = HookDispatcher()

    def test_apply_filters_without_listeners_returns_value(self) -> None:
        self.assertEqual(self.hooks.apply_filters("nothing", "value", 1, 2), "value")

    def test_filters_chain_in_priority_order(self) -> None:
        self.hooks.add_filter("title", lambda value: value + "b")
        self.hooks.add_filter("title", lambda value: value + "a", priority=5)
        self.hooks.add_filter("title", lambda value: value + "c")
        self.assertEqual(self.hooks.apply_filters("title", ""), "abc")

    def test_filters_receive_context(self) -> None:
        seen = []
        self.hooks.add_filter("form_id", lambda value, owner, extra: seen.append((owner, extra)) or value)
        self.hooks.apply_filters("form_id", "id", "owner", "extra")
        self.assertEqual(seen, [("owner", "extra")])

    def test_remove_filter(self) -> None:
        def upper(value):
            return value.upper()

        self.hooks.add_filter("text", upper)
        self.assertTrue(self.hooks.has_filter("text"))
        self.assertTrue(self.hooks.remove_filter("text", upper))
        self.assertFalse(self.hooks.has_filter("text"))
        self.assertFalse(self.hooks.remove_filter("text", upper))
        self.assertEqual(self.hooks.apply_filters("text", "abc"), "abc")

    def test_do_action_collects_output_in_order(self) -> None:
        self.hooks.add_action("render", lambda page: f"<b>{page}</b>")
        self.hooks.add_action("render", lambda page: None)
        self.hooks.add_action("render", lambda page: f"<i>{page}</i>", priority=1)
        self.assertEqual(self.hooks.do_action("render", "p"), "<i>p</i><b>p</b>")
        self.assertEqual(self.hooks.did_action("render"), 1)

    def test_do_action_without_listeners(self) -> None:
        self.assertEqual(self.hooks.do_action("missing"), "")
        self.assertEqual(self.hooks.did_action("missing"), 1)
        self.assertFalse(self.hooks.has_action("missing"))

    def test_listener_errors_propagate(self) -> None:
        def boom(page):
            raise RuntimeError("boom")

        self.hooks.add_action("render", boom)
        with self.assertRaises(RuntimeError):
            self.hooks.do_action("render", "p")

    def test_invalid_registration(self) -> None:
        with self.assertRaises(HookError) as ctx:
            self.hooks.add_filter("", lambda value: value)
        self.assertEqual(ctx.exception.code, "HOOK_NAME_INVALID")
        with self.assertRaises(HookError) as ctx:
            self.hooks.add_action("render", "not callable")
        self.assertEqual(ctx.exception.code, "HOOK_CALLBACK_INVALID")

    def test_clear(self) -> None:
        self.hooks.add_action("render", lambda: "x")
        self.hooks.add_filter("text", lambda value: value)
        self.hooks.do_action("render")
        self.hooks.clear()
        self.assertFalse(self.hooks.has_action("render"))
        self.assertFalse(self.hooks.has_filter("text"))
        self.assertEqual(self.hooks.did_action("render"), 0)


if __name__ == "__main__":
    unittest.main()
