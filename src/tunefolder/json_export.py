"""JSON rendering of a :class:`~tunefolder.models.Folder`.

Produces the ``folder.json`` document served to the viewer::

    {
      "name": "Trip Hazard",
      "content": [
        {
          "name": "Jigs",
          "content": [
            {
              "name": "Jigs 1 - The kesh set",
              "slug": "Jigs-1-The-kesh-set",
              "notes": [],
              "content": [{"filename": "", "slug": "The-Kesh", "abc": "X:1\\n..."}],
              "tags": [],
              "nextSlug": "...",
              "previousSlug": "..."
            }
          ]
        }
      ]
    }

``nextSlug``/``previousSlug`` only appear once the folder has been through
:func:`~tunefolder.linker.add_next_previous_slugs`.
"""

import json

from .models import Folder, Section, Tune, TuneSet


class FolderJsonFormatter:
    """Render a :class:`~tunefolder.models.Folder` to JSON text."""

    def __init__(self, indent: int | None = 2):
        self.indent = indent

    def render(self, folder: Folder) -> str:
        """Return JSON text for *folder*, ending with a single newline."""
        return json.dumps(folder_to_dict(folder), indent=self.indent, ensure_ascii=False) + "\n"


def folder_to_dict(folder: Folder) -> dict:
    return {"name": folder.name, "content": [_section_to_dict(s) for s in folder.content]}


def _section_to_dict(section: Section) -> dict:
    return {"name": section.name, "content": [_set_to_dict(s) for s in section.content]}


def _set_to_dict(tune_set: TuneSet) -> dict:
    data = {
        "name": tune_set.name,
        "slug": tune_set.slug,
        "notes": list(tune_set.notes),
        "content": [_tune_to_dict(t) for t in tune_set.content],
        "tags": list(tune_set.tags),
    }
    if tune_set.next_slug is not None:
        data["nextSlug"] = tune_set.next_slug
    if tune_set.previous_slug is not None:
        data["previousSlug"] = tune_set.previous_slug
    return data


def _tune_to_dict(tune: Tune) -> dict:
    return {"filename": tune.filename, "slug": tune.slug, "abc": tune.abc}
