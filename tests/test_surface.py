import unittest

from page_fakes import FakeElement, compose_page

from stylerewriter.compose.surface import ComposeWatch, SurfaceRegistry


class _FakeMutations:
    def __init__(self) -> None:
        self.listeners = []

    def subscribe(self, callback):
        self.listeners.append(callback)

        def unsubscribe():
            self.listeners.remove(callback)

        return unsubscribe

    def fire(self) -> None:
        for callback in list(self.listeners):
            callback()


class _Modal:
    def __init__(self) -> None:
        self.closed = False

    def close(self) -> None:
        self.closed = True


class SurfaceRegistryTests(unittest.TestCase):
    def test_ensure_creates_once_per_key(self):
        registry = SurfaceRegistry()
        created = []

        def factory():
            created.append(_Modal())
            return created[-1]

        first = registry.ensure("sr-rewrite-modal", factory)
        second = registry.ensure("sr-rewrite-modal", factory)

        self.assertIs(first, second)
        self.assertEqual(len(created), 1)
        self.assertIs(registry.get("sr-rewrite-modal"), first)

    def test_release_closes_and_allows_recreation(self):
        registry = SurfaceRegistry()
        modal = registry.ensure("sr-rewrite-modal", _Modal)

        self.assertTrue(registry.release("sr-rewrite-modal"))
        self.assertTrue(modal.closed)
        self.assertFalse(registry.release("sr-rewrite-modal"))
        self.assertIsNot(registry.ensure("sr-rewrite-modal", _Modal), modal)


class ComposeWatchTests(unittest.TestCase):
    def test_reports_region_changes_until_cancelled(self):
        document, nodes = compose_page()
        mutations = _FakeMutations()
        seen = []

        watch = ComposeWatch(document, mutations.subscribe, seen.append)
        mutations.fire()
        mutations.fire()

        self.assertEqual(len(seen), 1)
        self.assertIs(seen[0].element, nodes["body"])

        reply = FakeElement("div", attributes={"role": "textbox"}, content_editable=True)
        nodes["dialog"].append(reply)
        document.active_element = reply
        mutations.fire()

        self.assertEqual(len(seen), 2)
        self.assertIs(watch.current.element, reply)

        watch.cancel()
        watch.cancel()
        document.active_element = nodes["subject"]
        mutations.fire()

        self.assertEqual(len(seen), 2)
        self.assertEqual(mutations.listeners, [])

    def test_host_errors_during_lookup_do_not_reach_the_host(self):
        document, _nodes = compose_page()
        mutations = _FakeMutations()
        seen = []
        watch = ComposeWatch(document, mutations.subscribe, seen.append)

        def broken_iter():
            raise RuntimeError("document torn down")

        document.iter_elements = broken_iter
        mutations.fire()

        self.assertEqual(seen, [])
        self.assertIsNone(watch.current)
        watch.cancel()

    def test_context_manager_unsubscribes(self):
        document, _nodes = compose_page()
        mutations = _FakeMutations()

        with ComposeWatch(document, mutations.subscribe, lambda region: None):
            self.assertEqual(len(mutations.listeners), 1)

        self.assertEqual(mutations.listeners, [])


if __name__ == "__main__":
    unittest.main()
