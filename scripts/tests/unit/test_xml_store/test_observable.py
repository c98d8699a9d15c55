"""Tests for ObservableList."""

import copy
import pickle

from xml_store import ObservableList


class TestObservableList:
    def test_behaves_like_list(self):
        ol = ObservableList([1, 2])
        ol.append(3)
        assert ol == [1, 2, 3]
        assert isinstance(ol, list)

    def test_observers_see_changes(self):
        ol = ObservableList()
        seen = []
        ol.observe(lambda action, payload: seen.append((action, payload)))
        ol.append(1)
        ol.extend([2, 3])
        ol.insert(0, 0)
        ol[1] = 10
        ol.remove(10)
        del ol[0]
        ol.pop()
        ol.clear()
        assert [a for a, _ in seen] == [
            "append", "extend", "insert", "set", "remove", "delete", "remove", "clear",
        ]

    def test_detach(self):
        ol = ObservableList()
        seen = []
        detach = ol.observe(lambda action, payload: seen.append(action))
        detach()
        ol.append(1)
        assert seen == []

    def test_copy_keeps_type(self):
        copied = ObservableList([1]).copy()
        assert isinstance(copied, ObservableList)
        assert copied == [1]

    def test_in_place_operators_and_reordering_notify(self):
        ol = ObservableList([3, 1, 2])
        seen = []
        ol.observe(lambda action, payload: seen.append((action, payload)))
        ol += [4]
        ol *= 2
        ol.sort()
        ol.reverse()
        assert ol == [4, 4, 3, 3, 2, 2, 1, 1]
        assert seen == [("extend", [4]), ("repeat", 2), ("sort", None), ("reverse", None)]

    def test_iadd_keeps_identity_and_type(self):
        ol = ObservableList([1])
        same = ol
        ol += (2, 3)
        assert ol is same
        assert isinstance(ol, ObservableList)

    def test_copies_do_not_share_observers(self):
        ol = ObservableList([[1]])
        seen = []
        ol.observe(lambda action, payload: seen.append(action))
        for clone in (copy.copy(ol), copy.deepcopy(ol), pickle.loads(pickle.dumps(ol))):
            assert isinstance(clone, ObservableList)
            assert clone == [[1]]
            clone.append([2])
        assert seen == []

    def test_deepcopy_copies_items(self):
        ol = ObservableList([[1]])
        clone = copy.deepcopy(ol)
        clone[0].append(2)
        assert ol == [[1]]
