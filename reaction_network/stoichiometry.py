"""Stoichiometry matrices of a reaction network.

Rows are species in index order and columns are reactions (by name) in index order.
"""

from reaction_network.network import ReactionNetwork  # type: ignore
from reaction_network import util  # type: ignore

import numpy as np
import pandas as pd  # type: ignore


def _reactionNames(network: ReactionNetwork):
    return [r.name for r in network.reactions()]


def _makeMat(network: ReactionNetwork, attribute: str) -> np.ndarray:
    mat = np.zeros((network.numSpecies(), network.numReactions()), dtype=int)
    for icol, reaction in enumerate(network.reactions()):
        for species_name, coefficient in getattr(reaction, attribute):
            mat[network.getSpeciesIndex(species_name), icol] += coefficient
    return mat


def makeSubstrateStoichiometryMat(network: ReactionNetwork) -> np.ndarray:
    return _makeMat(network, "substrates")


def makeProductStoichiometryMat(network: ReactionNetwork) -> np.ndarray:
    return _makeMat(network, "products")


def makeNetStoichiometryMat(network: ReactionNetwork) -> np.ndarray:
    """Net stoichiometry matrix (products - substrates).

    Args:
        network (ReactionNetwork)

    Returns:
        np.ndarray: num_species X num_reactions integer matrix
    """
    mat = np.zeros((network.numSpecies(), network.numReactions()), dtype=int)
    for icol in range(network.numReactions()):
        for irow, net in network.netStoichiometry(icol):
            mat[irow, icol] = net
    return mat


def makeSubstrateStoichiometryDF(network: ReactionNetwork) -> pd.DataFrame:
    return util.mat2DF(makeSubstrateStoichiometryMat(network),
            column_names=_reactionNames(network), row_names=network.species())


def makeProductStoichiometryDF(network: ReactionNetwork) -> pd.DataFrame:
    return util.mat2DF(makeProductStoichiometryMat(network),
            column_names=_reactionNames(network), row_names=network.species())


def makeNetStoichiometryDF(network: ReactionNetwork) -> pd.DataFrame:
    return util.mat2DF(makeNetStoichiometryMat(network),
            column_names=_reactionNames(network), row_names=network.species())
