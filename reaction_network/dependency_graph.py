"""Dependency graphs between species and reactions.

The graphs are computed from the current state of a ReactionNetwork and are
not updated when the network changes. Each graph is a list indexed by the
source (reaction or species) index whose entries are sets of target indices.
"""

from reaction_network.network import ReactionNetwork  # type: ignore

from typing import List, Set


def reactionToSpeciesGraph(network: ReactionNetwork) -> List[Set[int]]:
    """Species whose amounts change when each reaction fires.

    Args:
        network (ReactionNetwork)

    Returns:
        List[Set[int]]: entry r holds the species indices in the net stoichiometry of r
    """
    return [set(idx for idx, _ in network.netStoichiometry(r))
            for r in range(network.numReactions())]


def speciesToReactionGraph(network: ReactionNetwork) -> List[Set[int]]:
    """Reactions whose rates read each species.

    Args:
        network (ReactionNetwork)

    Returns:
        List[Set[int]]: entry s holds the reactions with species s in their dependents
    """
    graph: List[Set[int]] = [set() for _ in range(network.numSpecies())]
    for r in range(network.numReactions()):
        for species_name in network.dependents(r):
            graph[network.getSpeciesIndex(species_name)].add(r)
    return graph


def reactionToReactionGraph(network: ReactionNetwork) -> List[Set[int]]:
    """Reactions whose rates must be recomputed after each reaction fires.

    Args:
        network (ReactionNetwork)

    Returns:
        List[Set[int]]: entry r holds every r' that depends on a species changed by r
    """
    species_graph = reactionToSpeciesGraph(network)
    dependency_graph = speciesToReactionGraph(network)
    graph: List[Set[int]] = []
    for species_indices in species_graph:
        reaction_indices: Set[int] = set()
        for s in species_indices:
            reaction_indices.update(dependency_graph[s])
        graph.append(reaction_indices)
    return graph
