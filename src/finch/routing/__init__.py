"""Routing — path patterns, route groups and the compiled route table.

Routes are registered during setup, composed through immutable groups,
and matched through a trie once the server freezes.
"""
