"""Constructs the ODE right hand side, Jacobian and noise matrix of a reaction network."""

import reaction_network.constants as cn  # type: ignore
from reaction_network.network import ReactionNetwork  # type: ignore
from reaction_network.rate_law import makeOdeRateLaw  # type: ignore
from reaction_network import util  # type: ignore

import logging
import numpy as np
import sympy as sp  # type: ignore
from typing import Callable, Dict, List

logger = logging.getLogger(__name__)


class OdeSystem(object):

    def __init__(self, network: ReactionNetwork, combinatoric_ratelaws: bool = True):
        """Builds the symbolic model equations from the current state of the network.
        Later changes to the network are not reflected.

        Args:
            network (ReactionNetwork)
            combinatoric_ratelaws (bool, optional): divide mass action terms by
                the factorial of the substrate coefficients. Defaults to True.
        """
        self.network = network.copy()
        self.combinatoric_ratelaws = combinatoric_ratelaws
        self.species_names = self.network.species()
        self.parameter_names = self.network.parameters()
        self.num_species = len(self.species_names)
        self.species_symbols: List[sp.Symbol] = [self.network.getSymbol(n) for n in self.species_names]
        self.parameter_symbols: List[sp.Symbol] = [self.network.getSymbol(n)
                for n in self.parameter_names]
        self.time_symbol = self.network.getSymbol(cn.TIME_SYMBOL)
        #
        self.rate_laws = [makeOdeRateLaw(self.network, j, combinatoric_ratelaws=combinatoric_ratelaws)
                for j in range(self.network.numReactions())]
        self.rhs_smat = self._makeRhs()
        self.jacobian_smat = self._makeJacobian()
        self.noise_smat = self._makeNoise()
        logger.debug("%s: built ODE system with %d species and %d reactions",
                self.network.name, self.num_species, len(self.rate_laws))

    def _makeRhs(self) -> sp.Matrix:
        # dS_i/dt = sum_j net_ij * v_j
        rhs_smat = sp.zeros(self.num_species, 1)
        for j, rate_law in enumerate(self.rate_laws):
            for irow, net in self.network.netStoichiometry(j):
                rhs_smat[irow, 0] += net * rate_law
        return rhs_smat

    def _makeJacobian(self) -> sp.Matrix:
        if self.num_species == 0:
            return sp.zeros(0, 0)
        return self.rhs_smat.jacobian(self.species_symbols)

    def _makeNoise(self) -> sp.Matrix:
        # Chemical Langevin noise: G_ij = net_ij * sqrt(v_j)
        noise_smat = sp.zeros(self.num_species, len(self.rate_laws))
        for j, rate_law in enumerate(self.rate_laws):
            for irow, net in self.network.netStoichiometry(j):
                noise_smat[irow, j] = net * sp.sqrt(rate_law)
        return noise_smat

    def jacobianSparsity(self) -> np.ndarray:
        """
        Structural sparsity pattern of the Jacobian.

        Returns:
            np.ndarray: boolean num_species X num_species matrix, True where the
                symbolic entry is not identically zero
        """
        pattern = np.zeros((self.num_species, self.num_species), dtype=bool)
        for irow in range(self.num_species):
            for icol in range(self.num_species):
                pattern[irow, icol] = self.jacobian_smat[irow, icol] != 0
        return pattern

    def _lambdify(self, smat: sp.Matrix, shape) -> Callable:
        func = sp.lambdify([self.species_symbols, self.parameter_symbols, self.time_symbol],
                smat, modules="numpy")
        ##
        def evaluate(u, p, t: float = 0.0) -> np.ndarray:
            return np.asarray(func(list(u), list(p), t), dtype=float).reshape(shape)
        ##
        return evaluate

    def makeRhsFunction(self) -> Callable:
        """
        Numeric right hand side f(u, p, t) with u in species order and p in parameter order.

        Returns:
            Callable returning an np.ndarray of length num_species
        """
        return self._lambdify(self.rhs_smat, (self.num_species,))

    def makeJacobianFunction(self) -> Callable:
        """
        Numeric Jacobian J(u, p, t) with u in species order and p in parameter order.

        Returns:
            Callable returning a num_species X num_species np.ndarray
        """
        return self._lambdify(self.jacobian_smat, (self.num_species, self.num_species))

    @staticmethod
    def substituteParameters(smat: sp.Matrix, parameter_dct: Dict[str, float]) -> sp.Matrix:
        """Substitutes parameter values by name."""
        return util.subsUsingName(smat, parameter_dct)
