"""Release Changelog Builder.

Turns the commits in a release range, and the issue tracker tickets their
messages reference, into a structured release report and a markdown
changelog message for automated release pipelines.
"""

__version__ = "0.1.0"
