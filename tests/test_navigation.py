"""Tests for click navigation between the panes."""

import pytest

from bireader.models import Side
from bireader.services.anchors import AnchorRegistry
from bireader.services.document_store import DocumentStore
from bireader.services.navigation import NavigationController, ViewerState
from tests.conftest import Element


@pytest.fixture
def mounted(store):
    """Every paragraph of the sample document mounted in both panes."""
    registry = AnchorRegistry()
    elements = {}
    for paragraph in store.current.paragraphs:
        for side in Side:
            element = Element(f"{paragraph.id}{side.value[0]}")
            elements[(paragraph.id, side)] = element
            registry.register(paragraph.id, side, element)
    state = ViewerState()
    navigation = NavigationController(registry, state, store)
    return navigation, state, registry, elements


class TestViewerState:
    def test_set_active_notifies_once(self, qtbot):
        state = ViewerState()
        with qtbot.waitSignal(state.active_paragraph_changed) as blocker:
            assert state.set_active(4)
        assert blocker.args == [4]
        with qtbot.assertNotEmitted(state.active_paragraph_changed):
            assert not state.set_active(4)

    def test_reset_clears_selection(self):
        state = ViewerState()
        state.set_active(2)
        state.reset("doc-other")
        assert state.document_id == "doc-other"
        assert state.active_paragraph_id is None


class TestNavigationController:
    """Test resolving clicks to their counterparts."""

    def test_body_click_scrolls_counterpart(self, qtbot, mounted):
        navigation, state, _registry, elements = mounted
        requests = []
        navigation.scroll_requested.connect(
            lambda element, side: requests.append((element, side))
        )
        assert navigation.handle_click(3, Side.SOURCE)
        assert state.active_paragraph_id == 3
        assert requests == [(elements[(3, Side.TARGET)], Side.TARGET)]

    def test_click_in_target_pane_scrolls_source(self, mounted):
        navigation, state, _registry, elements = mounted
        requests = []
        navigation.scroll_requested.connect(
            lambda element, side: requests.append((element, side))
        )
        navigation.handle_click(5, Side.TARGET)
        assert state.active_paragraph_id == 5
        assert requests == [(elements[(5, Side.SOURCE)], Side.SOURCE)]

    def test_highlight_precedes_scroll(self, mounted):
        navigation, state, _registry, _elements = mounted
        seen = []
        navigation.scroll_requested.connect(
            lambda _element, _side: seen.append(state.active_paragraph_id)
        )
        navigation.handle_click(2, Side.SOURCE)
        assert seen == [2]

    @pytest.mark.parametrize("paragraph_id", [1, 4])
    def test_non_navigable_click_is_ignored(self, qtbot, mounted, paragraph_id):
        navigation, state, _registry, _elements = mounted
        with qtbot.assertNotEmitted(navigation.scroll_requested):
            assert not navigation.handle_click(paragraph_id, Side.SOURCE)
        assert state.active_paragraph_id is None

    def test_unknown_paragraph_is_ignored(self, mounted):
        navigation, state, _registry, _elements = mounted
        assert not navigation.handle_click(99, Side.SOURCE)
        assert state.active_paragraph_id is None

    def test_unmounted_counterpart_only_selects(self, qtbot, mounted):
        navigation, state, registry, _elements = mounted
        registry.unregister(6, Side.TARGET)
        with qtbot.assertNotEmitted(navigation.scroll_requested):
            assert navigation.navigate(6, Side.SOURCE) is None
        assert state.active_paragraph_id == 6

    def test_clear(self, mounted):
        navigation, state, _registry, _elements = mounted
        navigation.handle_click(3, Side.SOURCE)
        navigation.clear()
        assert state.active_paragraph_id is None

    def test_step_forward_from_nothing(self, mounted):
        navigation, state, _registry, elements = mounted
        requests = []
        navigation.scroll_requested.connect(
            lambda element, side: requests.append((element, side))
        )
        assert navigation.step(1) == 2
        assert state.active_paragraph_id == 2
        assert requests == [
            (elements[(2, Side.SOURCE)], Side.SOURCE),
            (elements[(2, Side.TARGET)], Side.TARGET),
        ]

    def test_step_skips_headings(self, mounted):
        navigation, state, _registry, _elements = mounted
        navigation.handle_click(3, Side.SOURCE)
        assert navigation.step(1) == 5
        assert navigation.step(-1) == 3

    def test_step_stops_at_the_ends(self, mounted):
        navigation, _state, _registry, _elements = mounted
        assert navigation.step(-1) == 6
        assert navigation.step(1) == 6
        assert navigation.step(-10) == 2

    def test_step_without_document(self, qtbot):
        navigation = NavigationController(
            AnchorRegistry(), ViewerState(), DocumentStore()
        )
        with qtbot.assertNotEmitted(navigation.scroll_requested):
            assert navigation.step(1) is None
