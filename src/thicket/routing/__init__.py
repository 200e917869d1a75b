"""Routing: route tree construction, flattening and reverse lookup.

Trees are built once at startup, flattened into an ordered list of
endpoint descriptors, then discarded. Only the reverse router outlives
the build.
"""
