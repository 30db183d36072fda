from ad_variations.unionfind import DisjointSet


def test_union_and_groups():
    ds = DisjointSet(6)
    ds.union(4, 1)
    ds.union(1, 3)
    ds.union(5, 5)
    assert ds.find(3) == ds.find(4)
    assert ds.groups() == [[0], [1, 3, 4], [2], [5]]


def test_path_compression():
    ds = DisjointSet(4)
    ds.union(0, 1)
    ds.union(1, 2)
    ds.union(2, 3)
    root = ds.find(3)
    assert all(ds.parent[i] == root for i in range(4))
