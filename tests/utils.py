import numpy

from spknn import AAMBR


class MonoMBR:
    """Rectangle item tagged with an identifier."""

    def __init__(self, ll, ur, ident=0):
        self.box = AAMBR.from_corners(ll, ur)
        self.ident = ident

    def envelope(self):
        return self.box

    def __eq__(self, other):
        if not isinstance(other, MonoMBR):
            return NotImplemented
        return self.ident == other.ident and self.box == other.box

    __hash__ = None

    def __repr__(self):
        return "MonoMBR({}, {}, {})".format(
            self.box.mins.tolist(), self.box.maxs.tolist(), self.ident)


def random_rects(n, seed=0, extent=100., size=5.):
    rng = numpy.random.RandomState(seed)
    lls = rng.uniform(-extent, extent, size=(n, 2))
    sizes = rng.uniform(0, size, size=(n, 2))
    return [MonoMBR(ll, ll + wh, i)
            for i, (ll, wh) in enumerate(zip(lls, sizes))]


def farthest_distance(point, item):
    """Distance from `point` to the farthest corner of `item`; an upper
    bound of the box-distance, hence an admissible item score."""
    point = numpy.asarray(point, dtype=float)
    box = item.envelope()
    far = numpy.maximum(numpy.abs(point - box.mins),
                        numpy.abs(point - box.maxs))
    return float(numpy.sqrt((far**2).sum()))


def check_invariants(tree, check_fill=True):
    """Asserts the structural invariants of an R-tree."""
    depths = set()

    def walk(node, depth, is_root):
        if not node.children:
            assert is_root
            assert node.envelope is None
            return
        assert node.envelope == AAMBR.merge(c.envelope
                                            for c in node.children)
        assert len({c.is_leaf for c in node.children}) == 1
        assert len(node.children) <= tree.max_children
        if check_fill and not is_root:
            assert len(node.children) >= tree.min_children
        for child in node.children:
            if child.is_leaf:
                depths.add(depth)
            else:
                walk(child, depth + 1, False)

    walk(tree.root, 1, True)
    assert len(depths) <= 1
    if depths:
        assert depths == {tree.height}
    assert sum(1 for _ in tree) == len(tree)
