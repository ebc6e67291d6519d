"""
Helper modules for the order dashboard.

- formatting: map links and rupee formatting
- derivations: filtered views and aggregate statistics
"""
