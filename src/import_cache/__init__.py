"""Cached direct and transitive import graphs for incremental builds."""
