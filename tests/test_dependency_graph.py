from reaction_network.network import ReactionNetwork  # type: ignore
from reaction_network import dependency_graph as dg  # type: ignore
from tests.common_test import makeRepressilator  # type: ignore

import unittest

IGNORE_TEST = False


class TestDependencyGraph(unittest.TestCase):

    def setUp(self):
        self.network = ReactionNetwork(species_names=["A", "B"], parameter_names=["k"])
        self.network.addReaction("k", ["A"], ["B"])
        self.network.addReaction("k", ["B"], ["A"])

    def testReactionToSpeciesGraph(self):
        if IGNORE_TEST:
            return
        graph = dg.reactionToSpeciesGraph(self.network)
        self.assertEqual(graph, [{0, 1}, {0, 1}])

    def testSpeciesToReactionGraph(self):
        if IGNORE_TEST:
            return
        graph = dg.speciesToReactionGraph(self.network)
        self.assertEqual(graph, [{0}, {1}])

    def testReactionToReactionGraph(self):
        if IGNORE_TEST:
            return
        graph = dg.reactionToReactionGraph(self.network)
        self.assertIn(1, graph[0])
        self.assertEqual(graph, [{0, 1}, {0, 1}])

    def testCatalyst(self):
        if IGNORE_TEST:
            return
        # C is read by the rate but never changed
        self.network.addSpecies("C")
        self.network.addReaction("k", ["A", "C"], ["B", "C"])
        self.assertEqual(dg.reactionToSpeciesGraph(self.network)[2], {0, 1})
        self.assertEqual(dg.speciesToReactionGraph(self.network)[2], {2})
        graph = dg.reactionToReactionGraph(self.network)
        self.assertEqual(graph[2], {0, 1, 2})
        self.assertEqual(graph[0], {0, 1, 2})

    def testEmpty(self):
        if IGNORE_TEST:
            return
        network = ReactionNetwork(species_names=["A"])
        self.assertEqual(dg.reactionToSpeciesGraph(network), [])
        self.assertEqual(dg.speciesToReactionGraph(network), [set()])
        self.assertEqual(dg.reactionToReactionGraph(network), [])

    def testGraphsRecomputed(self):
        if IGNORE_TEST:
            return
        graph = dg.speciesToReactionGraph(self.network)
        self.network.addReaction("k*A", [], ["B"], only_use_rate=True)
        self.assertEqual(graph, [{0}, {1}])
        self.assertEqual(dg.speciesToReactionGraph(self.network), [{0, 2}, {1}])

    def testRepressilator(self):
        if IGNORE_TEST:
            return
        network = makeRepressilator()
        species_graph = dg.reactionToSpeciesGraph(network)
        reaction_graph = dg.reactionToReactionGraph(network)
        for r in range(network.numReactions()):
            expected = set()
            for r2 in range(network.numReactions()):
                dependent_indices = set(network.getSpeciesIndex(n)
                        for n in network.dependents(r2))
                if len(dependent_indices & species_graph[r]) > 0:
                    expected.add(r2)
            self.assertEqual(reaction_graph[r], expected)
        # Translation of P1 (reaction 9) changes P1, which represses m2 (reaction 1)
        self.assertIn(1, reaction_graph[9])
        self.assertEqual(species_graph[9], {network.getSpeciesIndex("P1")})


if __name__ == '__main__':
    unittest.main()
