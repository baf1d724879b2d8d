from brokenlinks.state import Frontier, VisitedSet


def test_visited_set_mark_is_idempotent():
    visited = VisitedSet()
    assert not visited.contains("http://example.org/")
    visited.mark_visited("http://example.org/")
    visited.mark_visited("http://example.org/")
    assert visited.contains("http://example.org/")
    assert "http://example.org/" in visited
    assert len(visited) == 1


def test_frontier_is_lifo_by_default():
    frontier = Frontier()
    for url in ("a", "b", "c"):
        frontier.push(url)
    assert [frontier.pop(), frontier.pop(), frontier.pop()] == ["c", "b", "a"]
    assert frontier.is_empty()


def test_frontier_breadth_first_is_fifo():
    frontier = Frontier(breadth_first=True)
    for url in ("a", "b", "c"):
        frontier.push(url)
    assert [frontier.pop(), frontier.pop(), frontier.pop()] == ["a", "b", "c"]


def test_frontier_pop_empty_returns_none():
    frontier = Frontier()
    assert frontier.is_empty()
    assert frontier.pop() is None
    assert len(frontier) == 0
