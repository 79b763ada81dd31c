class IdRemapper:
    """Maps client-side identifiers to the ones assigned by the store on insert.

    Lookups compare identifiers as strings. Anything never registered resolves
    to None, which callers store as "no folder".
    """

    def __init__(self):
        self._mapping = {}

    def register(self, old_id, new_id):
        if old_id in (None, ''):
            return
        self._mapping[str(old_id)] = new_id

    def resolve(self, old_id):
        if old_id in (None, ''):
            return None
        return self._mapping.get(str(old_id))

    def __len__(self):
        return len(self._mapping)
