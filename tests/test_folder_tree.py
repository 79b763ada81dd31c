"""
Tests for utils/folder_tree.py: pure Python, no DB.
"""
import random

from utils.folder_tree import sort_folders_for_insert


def folder(fid, parent=None):
    return {'id': fid, 'name': fid.upper(), 'parentFolderId': parent}


def ids(folders):
    return [f['id'] for f in folders]


def assert_parents_first(result):
    seen = set()
    for f in result:
        if f['parentFolderId'] is not None:
            assert f['parentFolderId'] in seen, f"{f['id']} emitted before its parent"
        seen.add(f['id'])


class TestOrdering:
    def test_empty(self):
        assert sort_folders_for_insert([]) == []

    def test_roots_keep_input_order(self):
        result = sort_folders_for_insert([folder('a'), folder('b'), folder('c')])
        assert ids(result) == ['a', 'b', 'c']

    def test_child_listed_before_parent(self):
        result = sort_folders_for_insert([folder('b', 'a'), folder('a')])
        assert ids(result) == ['a', 'b']
        assert result[1]['parentFolderId'] == 'a'

    def test_reversed_deep_chain(self):
        chain = [folder('f0')] + [folder(f'f{i}', f'f{i - 1}') for i in range(1, 12)]
        result = sort_folders_for_insert(list(reversed(chain)))
        assert ids(result) == [f'f{i}' for i in range(12)]

    def test_numeric_parent_matches_string_id(self):
        result = sort_folders_for_insert([{'id': '2', 'parentFolderId': 1}, {'id': 1, 'parentFolderId': None}])
        assert [str(f['id']) for f in result] == ['1', '2']
        assert result[1]['parentFolderId'] == 1


class TestOrphans:
    def test_dangling_parent_becomes_root(self):
        result = sort_folders_for_insert([folder('a', 'missing')])
        assert ids(result) == ['a']
        assert result[0]['parentFolderId'] is None

    def test_self_parent_becomes_root(self):
        result = sort_folders_for_insert([folder('a', 'a')])
        assert result[0]['parentFolderId'] is None

    def test_cycle_is_not_dropped(self):
        folders = [folder('a', 'b'), folder('b', 'a'), folder('root')]
        result = sort_folders_for_insert(folders)
        assert sorted(ids(result)) == ['a', 'b', 'root']
        assert ids(result)[0] == 'root'
        orphans = {f['id']: f['parentFolderId'] for f in result[1:]}
        assert orphans == {'a': None, 'b': None}

    def test_input_is_not_mutated(self):
        folders = [folder('a', 'b'), folder('b', 'a')]
        sort_folders_for_insert(folders)
        assert folders[0]['parentFolderId'] == 'b'
        assert folders[1]['parentFolderId'] == 'a'

    def test_valid_children_of_resolved_parents_survive_next_to_cycle(self):
        folders = [folder('x', 'y'), folder('y', 'x'), folder('child', 'root'), folder('root')]
        result = sort_folders_for_insert(folders)
        by_id = {f['id']: f for f in result}
        assert by_id['child']['parentFolderId'] == 'root'
        assert_parents_first(result)


class TestRandomForests:
    def test_no_drops_no_duplicates_parents_first(self):
        rng = random.Random(1234)
        for _ in range(50):
            n = rng.randint(1, 25)
            folders = []
            for i in range(n):
                roll = rng.random()
                if i == 0 or roll < 0.2:
                    parent = None
                elif roll < 0.3:
                    parent = f'ghost{i}'
                elif roll < 0.4:
                    parent = f'f{rng.randrange(n)}'  # may point forward: cycles possible
                else:
                    parent = f'f{rng.randrange(i)}'
                folders.append(folder(f'f{i}', parent))
            rng.shuffle(folders)

            result = sort_folders_for_insert(folders)

            assert sorted(ids(result)) == sorted(ids(folders))
            assert len(set(ids(result))) == len(result)
            assert_parents_first(result)
