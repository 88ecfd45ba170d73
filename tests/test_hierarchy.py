import random

import pytest
from conftest import seed, seed_chain

from domain.entities import HierarchicalEmployee
from domain.errors import EmployeeNotFoundError
from services.hierarchy import HierarchyBuilder


def subtree_size(node: HierarchicalEmployee) -> int:
    return 1 + sum(subtree_size(child) for child in node.subordinates)


def walk(node: HierarchicalEmployee):
    yield node
    for child in node.subordinates:
        yield from walk(child)


class TestBuildHierarchy:
    async def test_unknown_employee(self, repo):
        with pytest.raises(EmployeeNotFoundError):
            await HierarchyBuilder(repo).build_hierarchy(999)

    async def test_leaf(self, repo):
        a = await seed(repo, 'A')

        tree = await HierarchyBuilder(repo).build_hierarchy(a.id)

        assert tree.id == a.id
        assert tree.subordinates == ()
        assert tree.total_subordinates_count == 0

    async def test_chain_counts(self, repo):
        a, b, c = await seed_chain(repo)

        tree = await HierarchyBuilder(repo).build_hierarchy(a.id)

        assert tree.total_subordinates_count == 2
        assert [s.id for s in tree.subordinates] == [b.id]
        b_node = tree.subordinates[0]
        assert b_node.total_subordinates_count == 1
        assert [s.id for s in b_node.subordinates] == [c.id]
        assert b_node.subordinates[0].total_subordinates_count == 0

    async def test_subtree_of_middle_node(self, repo):
        _, b, c = await seed_chain(repo)

        tree = await HierarchyBuilder(repo).build_hierarchy(b.id)

        assert tree.manager_id is not None
        assert tree.total_subordinates_count == 1
        assert tree.subordinates[0].id == c.id

    async def test_children_ordered_by_id(self, repo):
        root = await seed(repo, 'Root')
        kids = [await seed(repo, f'Kid{i}', root) for i in range(4)]

        tree = await HierarchyBuilder(repo).build_hierarchy(root.id)

        assert [s.id for s in tree.subordinates] == [k.id for k in kids]
        assert tree.total_subordinates_count == 4

    async def test_count_equals_subtree_size_minus_one(self, repo):
        rng = random.Random(7)
        employees = [await seed(repo, 'Root')]
        for i in range(30):
            employees.append(await seed(repo, f'E{i}', rng.choice(employees)))

        tree = await HierarchyBuilder(repo).build_hierarchy(employees[0].id)

        assert tree.total_subordinates_count == 30
        for node in walk(tree):
            assert node.total_subordinates_count == subtree_size(node) - 1

    async def test_idempotent(self, repo):
        a, _, _ = await seed_chain(repo)
        builder = HierarchyBuilder(repo)

        assert await builder.build_hierarchy(a.id) == await builder.build_hierarchy(a.id)
