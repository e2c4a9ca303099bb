"""
Basic import tests to verify the core functionality.
"""


def test_visitor_log_imports():
    """Test that the core visitor_log package exposes its public API."""
    from visitor_log import (
        EventLogStore,
        StatsAggregator,
        VisitorEvent,
        StorageUnavailable,
        classify_user_agent,
    )

    assert callable(classify_user_agent)
    assert issubclass(StorageUnavailable, Exception)

    event = VisitorEvent(id=1, timestamp="2025-01-01T00:00:00.000Z")
    assert event.to_dict()["id"] == 1
    assert EventLogStore is not None
    assert StatsAggregator().summarize([]).total_visits == 0


def test_app_subsystem_imports():
    """Test that each web subsystem factory can be imported."""
    from app.collector.factory import create_collector_module
    from app.visitor_logs.factory import create_visitor_logs_module
    from app.visitor_stats.factory import create_visitor_stats_module

    assert callable(create_collector_module)
    assert callable(create_visitor_logs_module)
    assert callable(create_visitor_stats_module)
