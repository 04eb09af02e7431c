"""Routing — pattern registry, route table, matcher and cache.

Routes are registered during setup into a newest-first table and
matched linearly at request time, first match wins.
"""
