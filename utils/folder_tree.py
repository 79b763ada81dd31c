"""
Parent-before-child ordering for folder inserts.

Folders reference their parent through ``parentFolderId``. A store with a
foreign key on that column needs every parent inserted before its children,
so the folder list is ordered here before any insert happens.
"""


def _key(value):
    return str(value) if value not in (None, '') else None


def sort_folders_for_insert(folders):
    """
    Return the folders ordered so each parent precedes its children.

    Each pass over the remaining folders emits those whose parent is null or
    already emitted. After at most n*n passes whatever is left (cycles,
    self-parents, parents missing from the set) is appended as a root, with
    ``parentFolderId`` forced to None on a copy. Every input folder is emitted
    exactly once and the input is left untouched.
    """
    remaining = list(folders)
    ordered = []
    emitted = set()

    max_passes = len(remaining) * len(remaining)
    passes = 0

    while remaining and passes < max_passes:
        passes += 1
        still_waiting = []
        for folder in remaining:
            parent = _key(folder.get('parentFolderId'))
            if parent is None or parent in emitted:
                ordered.append(folder)
                emitted.add(_key(folder.get('id')))
            else:
                still_waiting.append(folder)

        if len(still_waiting) == len(remaining):
            break
        remaining = still_waiting

    for folder in remaining:
        orphan = dict(folder)
        orphan['parentFolderId'] = None
        ordered.append(orphan)

    return ordered
