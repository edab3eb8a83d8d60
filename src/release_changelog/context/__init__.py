"""Collaborators that gather the data the changelog core consumes.

These modules fetch commits from source control and ticket metadata from
the issue tracker, and resolve them into CommitLogEntry objects the
aggregation and rendering steps work on.
"""
