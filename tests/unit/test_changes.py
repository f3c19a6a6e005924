"""Unit tests for the table change feed."""

from bookshelf.db.changes import ChangeFeed


class TestChangeFeed:
    """Test subscription and fan-out."""

    def test_subscriber_hears_its_tables(self):
        feed = ChangeFeed()
        received = []
        feed.subscribe(["saved_books"], received.append)

        feed.publish(["saved_books", "list_books"])

        assert received == [frozenset({"saved_books", "list_books"})]

    def test_unrelated_tables_are_ignored(self):
        feed = ChangeFeed()
        received = []
        feed.subscribe(["reading_lists"], received.append)

        feed.publish(["saved_books"])

        assert received == []

    def test_called_once_per_publish(self):
        """A subscriber to several touched tables is notified once."""
        feed = ChangeFeed()
        received = []
        feed.subscribe(["saved_books", "list_books"], received.append)

        feed.publish(["saved_books", "list_books"])

        assert len(received) == 1

    def test_unsubscribe(self):
        feed = ChangeFeed()
        received = []
        unsubscribe = feed.subscribe(["saved_books"], received.append)
        assert feed.subscriber_count("saved_books") == 1

        unsubscribe()
        feed.publish(["saved_books"])

        assert received == []
        assert feed.subscriber_count("saved_books") == 0
