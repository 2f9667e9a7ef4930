"""
ACM Watcher Services

- Watch Service - address resolution, long-poll change detection, config fetch
"""
