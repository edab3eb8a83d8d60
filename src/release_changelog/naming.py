"""Release name generation.

A release name is a display label for one pipeline run. When the pipeline
supplies an explicit version it is used verbatim; otherwise a haiku-style
``adjective-noun-NNNN`` label is generated with haikunator. Names carry no
uniqueness guarantee.
"""

from __future__ import annotations

from haikunator import Haikunator


def name_release(override: str | None = None, seed: int | str | None = None) -> str:
    """Return the label for this release run.

    Args:
        override: Explicit release name (e.g., "v1.2.3"). Returned unchanged
                  when non-empty.
        seed: Seed for the generated name. Pass a fixed value for
              deterministic output.

    Returns:
        The override, or a generated ``adjective-noun-NNNN`` label
    """
    return override or Haikunator(seed=seed).haikunate()
