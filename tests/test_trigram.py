import random

from ghostwriter.models.trigram import NIL, TrigramIndex, TrigramModel
from ghostwriter.utils.counts import FREQ_MAX


def test_record_creates_node_lazily():
    index = TrigramIndex()
    assert index.lookup((1, 2)) is None
    node = index.record((1, 2), 3)
    assert index.lookup((1, 2)) is node
    assert node.freq == 1
    assert list(node.entries()) == [(3, 1)]
    assert len(index) == 1


def test_key_order_matters():
    index = TrigramIndex()
    index.record((1, 2), 3)
    assert (2, 1) not in index
    assert (1, 2) in index


def test_successors_keep_first_seen_order():
    index = TrigramIndex()
    for c in [9, 4, 9, 7, 4, 9]:
        index.record((5, 5), c)
    node = index.lookup((5, 5))
    assert list(node.entries()) == [(9, 3), (4, 2), (7, 1)]
    assert node.freq == 6


def test_aggregate_matches_successor_sum():
    rng = random.Random(0)
    index = TrigramIndex()
    for _ in range(2000):
        index.record((rng.randrange(4), rng.randrange(4)), rng.randrange(10))
        for node in index.nodes:
            assert node.freq == sum(node.counts)


def test_traverse_in_key_order():
    rng = random.Random(1)
    keys = [(rng.randrange(20), rng.randrange(20)) for _ in range(100)]
    index = TrigramIndex()
    for key in keys:
        index.record(key, 0)
    walked = [node.key for node in index.traverse()]
    assert walked == sorted(set(keys))


def test_tree_links_by_position():
    index = TrigramIndex()
    index.record((5, 5), 0)
    index.record((3, 9), 0)
    index.record((5, 6), 0)
    root = index.nodes[0]
    assert index.nodes[root.left].key == (3, 9)
    assert index.nodes[root.right].key == (5, 6)
    assert index.nodes[root.left].left == NIL


def test_sorted_input_degenerates_to_list():
    index = TrigramIndex()
    for a in range(50):
        index.record((a, 0), 1)
    assert index.depth() == 50
    assert index.lookup((49, 0)) is not None


def test_empty_index():
    index = TrigramIndex()
    assert list(index.traverse()) == []
    assert index.depth() == 0


def test_saturation_rescales_node():
    index = TrigramIndex()
    context = (1, 2)
    for _ in range(3):
        index.record(context, 5)
    for _ in range(FREQ_MAX):
        index.record(context, 7)
    node = index.lookup(context)
    assert dict(node.entries()) == {5: 3, 7: FREQ_MAX}
    assert node.freq == 3 + FREQ_MAX

    index.record(context, 7)
    halved = (3 >> 1) + (FREQ_MAX >> 1)
    assert dict(node.entries()) == {5: 1, 7: (FREQ_MAX >> 1) + 1}
    assert node.freq == halved + 1
    assert node.freq == sum(node.counts)


def test_probabilities():
    index = TrigramIndex()
    for c in [1, 1, 1, 2]:
        index.record((0, 0), c)
    assert index.lookup((0, 0)).probabilities() == [(1, 0.75), (2, 0.25)]


def test_model_starts_with_stx():
    model = TrigramModel()
    assert model.dictionary.resolve(model.stx) == '\x02'
    assert model.start() == (model.stx, model.stx)
    assert model.etx is None
    assert len(model.dictionary) == 1
