"""Services.

Services hold the aggregation logic and are called by routes. Store
handles are passed in explicitly; services never open connections.
"""
