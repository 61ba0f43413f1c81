"""Rate laws of individual reactions.

Mass action reactions scale the rate by their substrates. Reactions declared
with only_use_rate use the rate expression unchanged.
"""

from reaction_network.network import ReactionNetwork  # type: ignore

import sympy as sp  # type: ignore


def makeOdeRateLaw(network: ReactionNetwork, index: int,
        combinatoric_ratelaws: bool = True) -> sp.Expr:
    """Deterministic rate law, rate * prod(S**n / n!).

    Args:
        network (ReactionNetwork)
        index (int): reaction index
        combinatoric_ratelaws (bool): divide by the factorial of each coefficient

    Returns:
        sp.Expr
    """
    reaction = network.getReaction(index)
    rate_law = reaction.rate.toExpr()
    if reaction.only_use_rate:
        return rate_law
    for species_name, coefficient in reaction.substrates:
        term = network.getSymbol(species_name)**coefficient
        if combinatoric_ratelaws:
            term = term / sp.factorial(coefficient)
        rate_law = rate_law * term
    return rate_law


def makeJumpRateLaw(network: ReactionNetwork, index: int,
        combinatoric_ratelaws: bool = True) -> sp.Expr:
    """Stochastic propensity, rate * prod(S*(S-1)*...*(S-n+1) / n!).

    Args:
        network (ReactionNetwork)
        index (int): reaction index
        combinatoric_ratelaws (bool): divide by the factorial of each coefficient

    Returns:
        sp.Expr
    """
    reaction = network.getReaction(index)
    rate_law = reaction.rate.toExpr()
    if reaction.only_use_rate:
        return rate_law
    for species_name, coefficient in reaction.substrates:
        symbol = network.getSymbol(species_name)
        term = sp.Mul(*[symbol - i for i in range(coefficient)])
        if combinatoric_ratelaws:
            term = term / sp.factorial(coefficient)
        rate_law = rate_law * term
    return rate_law
