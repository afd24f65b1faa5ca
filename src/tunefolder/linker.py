"""Next/previous navigation links between sets."""

import copy

from .models import Folder


def add_next_previous_slugs(folder: Folder) -> Folder:
    """Return a copy of *folder* where every set links to its neighbours.

    Neighbours are taken over all sets in document order, ignoring section
    boundaries, and wrap around: the last set's next is the first set.  A
    folder with one set links that set to itself.  *folder* is not modified.
    """
    linked = copy.deepcopy(folder)
    sets = linked.sets()
    count = len(sets)
    for index, tune_set in enumerate(sets):
        tune_set.next_slug = sets[(index + 1) % count].slug
        tune_set.previous_slug = sets[(index - 1) % count].slug
    return linked
