"""Registry of the species, parameters and reactions of a chemical reaction network."""

import reaction_network.constants as cn  # type: ignore
from reaction_network.errors import (DuplicateNameError, IndexOutOfRangeError,  # type: ignore
        MalformedNameError, MalformedStoichiometryError, UnknownSpeciesError)
from reaction_network.rate_spec import (RateSpec, Numeric, Symbolic,  # type: ignore
        ReversiblePair, makeRateSpec)

from collections import namedtuple
import keyword
import logging
import numbers
import sympy as sp  # type: ignore
from sympy.core.function import AppliedUndef  # type: ignore
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set, Tuple, Union

logger = logging.getLogger(__name__)

# substrates, products: tuple of (species_name, coefficient) in declaration order
# dependents: frozenset of species names read by the rate law
Reaction = namedtuple('Reaction',
        ['name', 'rate', 'substrates', 'products', 'dependents', 'only_use_rate'])
ReactionDeclaration = namedtuple('ReactionDeclaration',
        ['rate', 'substrates', 'products', 'only_use_rate'], defaults=[False])

StoichiometryInput = Iterable[Union[str, Tuple[str, int]]]


class ReactionNetwork(object):
    """Chemical reaction network.

    Species, parameters and reactions are appended in order and never removed.
    Indices are 0-based and stable once assigned.
    """

    def __init__(self,
            species_names: Optional[Sequence[str]] = None,
            parameter_names: Optional[Sequence[str]] = None,
            reactions: Optional[Sequence[Any]] = None,
            name: str = cn.DEFAULT_NETWORK_NAME):
        """
        Args:
            species_names (list-str, optional): species in index order
            parameter_names (list-str, optional): parameters in index order
            reactions (list, optional): entries are ReactionDeclaration or
                (rate, substrates, products[, only_use_rate]) tuples
            name (str, optional): network name
        """
        self.name = name
        self._species_names: List[str] = []
        self._parameter_names: List[str] = []
        self._reactions: List[Reaction] = []
        self._symbol_dct: Dict[str, sp.Symbol] = {cn.TIME_SYMBOL: sp.Symbol(cn.TIME_SYMBOL)}
        #
        for species_name in species_names or []:
            self.addSpecies(species_name)
        for parameter_name in parameter_names or []:
            self.addParameter(parameter_name)
        for declaration in reactions or []:
            declaration = ReactionDeclaration(*declaration)
            self.addReaction(declaration.rate, declaration.substrates,
                    declaration.products, only_use_rate=declaration.only_use_rate)

    ############### Registration ###############
    def _checkNewName(self, name: str) -> None:
        if not isinstance(name, str) or not name.isidentifier() or keyword.iskeyword(name):
            raise MalformedNameError(f"Invalid name: {name!r}", context={"name": name})
        if name == cn.TIME_SYMBOL:
            raise MalformedNameError(f"Name {name!r} is reserved for time",
                    context={"name": name})
        if name in self._species_names:
            raise DuplicateNameError(f"Name {name} is already a species",
                    context={"name": name})
        if name in self._parameter_names:
            raise DuplicateNameError(f"Name {name} is already a parameter",
                    context={"name": name})
        if name in [r.name for r in self._reactions]:
            raise DuplicateNameError(f"Name {name} is already a reaction",
                    context={"name": name})

    def addSpecies(self, name: str) -> int:
        """Registers a species.

        Args:
            name (str): Species name

        Returns:
            int: index of the species
        """
        self._checkNewName(name)
        self._species_names.append(name)
        self._symbol_dct[name] = sp.Symbol(name)
        logger.debug("%s: added species %s", self.name, name)
        return len(self._species_names) - 1

    def addParameter(self, name: str) -> int:
        """Registers a parameter.

        Args:
            name (str): Parameter name

        Returns:
            int: index of the parameter
        """
        self._checkNewName(name)
        self._parameter_names.append(name)
        self._symbol_dct[name] = sp.Symbol(name)
        logger.debug("%s: added parameter %s", self.name, name)
        return len(self._parameter_names) - 1

    def _makeStoichiometry(self, entries: Optional[StoichiometryInput]) -> Tuple[Tuple[str, int], ...]:
        # Validates (name, coefficient) entries and merges repeated names
        if entries is None:
            return ()
        if isinstance(entries, (str, tuple)) and _isEntry(entries):
            entries = [entries]  # type: ignore
        stoichiometry_dct: Dict[str, int] = {}
        for entry in entries:
            if isinstance(entry, str):
                species_name, coefficient = entry, 1
            else:
                try:
                    species_name, coefficient = entry
                except (TypeError, ValueError):
                    raise MalformedStoichiometryError(
                        f"Expected (species, coefficient), got {entry!r}",
                        context={"entry": entry})
            if species_name not in self._species_names:
                raise UnknownSpeciesError(f"Species {species_name} is not registered",
                        context={"name": species_name})
            coefficient = _checkCoefficient(species_name, coefficient)
            stoichiometry_dct[species_name] = stoichiometry_dct.get(species_name, 0) + coefficient
        return tuple(stoichiometry_dct.items())

    def _normalizeRate(self, rate: Union[Numeric, Symbolic]) -> Union[Numeric, Symbolic]:
        # Checks the symbols a rate reads and replaces them by the registered symbols
        if isinstance(rate, Numeric):
            return rate
        undefined_names = sorted(str(f.func) for f in rate.expr.atoms(AppliedUndef))
        if len(undefined_names) > 0:
            raise UnknownSpeciesError(
                f"Rate {rate} calls unknown functions: {undefined_names}",
                context={"names": undefined_names})
        unknown_names = [n for n in rate.free_names if n not in self._symbol_dct]
        if len(unknown_names) > 0:
            raise UnknownSpeciesError(
                f"Rate {rate} references unregistered names: {sorted(unknown_names)}",
                context={"names": sorted(unknown_names)})
        replacement_dct = {s: self._symbol_dct[str(s)] for s in rate.expr.free_symbols}
        return Symbolic(rate.expr.xreplace(replacement_dct))

    def _makeReaction(self, name: str, rate: Union[Numeric, Symbolic],
            substrates: Tuple[Tuple[str, int], ...],
            products: Tuple[Tuple[str, int], ...], only_use_rate: bool) -> Reaction:
        dependent_names = set(n for n, _ in substrates)
        dependent_names.update(n for n in rate.free_names if n in self._species_names)
        return Reaction(name=name, rate=rate, substrates=substrates, products=products,
                dependents=frozenset(dependent_names), only_use_rate=only_use_rate)

    def _getUsedNames(self) -> Set[str]:
        # Species, parameters and reactions share one namespace in SBML
        used_names = set(self._species_names)
        used_names.update(self._parameter_names)
        used_names.update(r.name for r in self._reactions)
        return used_names

    def _makeReactionNames(self, name: Optional[str], num_name: int) -> List[str]:
        # Names for the next num_name reactions. The second is the backward reaction of a pair.
        used_names = self._getUsedNames()
        if name is None:
            names: List[str] = []
            idx = len(self._reactions)
            while len(names) < num_name:
                candidate = f"{cn.REACTION_PREFIX}{idx}"
                if candidate not in used_names:
                    names.append(candidate)
                idx += 1
            return names
        if not isinstance(name, str) or not name.isidentifier() or keyword.iskeyword(name) \
                or name == cn.TIME_SYMBOL:
            raise MalformedNameError(f"Invalid reaction name: {name!r}", context={"name": name})
        names = [name, f"{name}_rev"][:num_name]
        for new_name in names:
            if new_name in used_names:
                raise DuplicateNameError(f"Name {new_name} is already in use",
                        context={"name": new_name})
        return names

    def addReaction(self, rate: Any,
            substrates: Optional[StoichiometryInput],
            products: Optional[StoichiometryInput],
            only_use_rate: bool = False,
            name: Optional[str] = None) -> List[int]:
        """Appends a reaction. A reversible rate appends the forward and then the
        backward reaction. Nothing is appended if any argument is invalid.

        Args:
            rate: number, sympy expression, str, RateSpec or (forward, backward) pair
            substrates (list): (species_name, coefficient) pairs or species names
            products (list): (species_name, coefficient) pairs or species names
            only_use_rate (bool): rate is the complete rate law (no mass action terms)
            name (str, optional): reaction name. Defaults to the first unused J<n>
                with n >= index.
                The backward reaction of a reversible pair is named <name>_rev.

        Returns:
            List[int]: indices of the appended reactions
        """
        substrate_tpl = self._makeStoichiometry(substrates)
        product_tpl = self._makeStoichiometry(products)
        rate_spec = makeRateSpec(rate, self._symbol_dct)
        if isinstance(rate_spec, ReversiblePair):
            forward_name, backward_name = self._makeReactionNames(name, 2)
            new_reactions = [
                self._makeReaction(forward_name, self._normalizeRate(rate_spec.forward),
                        substrate_tpl, product_tpl, only_use_rate),
                self._makeReaction(backward_name, self._normalizeRate(rate_spec.backward),
                        product_tpl, substrate_tpl, only_use_rate),
                ]
        else:
            new_reactions = [self._makeReaction(self._makeReactionNames(name, 1)[0],
                    self._normalizeRate(rate_spec), substrate_tpl, product_tpl, only_use_rate)]
        #
        indices = []
        for reaction in new_reactions:
            self._reactions.append(reaction)
            indices.append(len(self._reactions) - 1)
            logger.debug("%s: added reaction %s", self.name, self.describeReaction(indices[-1]))
        return indices

    ############### Queries ###############
    def species(self) -> List[str]:
        return list(self._species_names)

    def parameters(self) -> List[str]:
        return list(self._parameter_names)

    def reactions(self) -> Tuple[Reaction, ...]:
        return tuple(self._reactions)

    def numSpecies(self) -> int:
        return len(self._species_names)

    def numParameters(self) -> int:
        return len(self._parameter_names)

    def numReactions(self) -> int:
        return len(self._reactions)

    def getSymbol(self, name: str) -> sp.Symbol:
        """Symbol used for a species, parameter or time in rate expressions."""
        try:
            return self._symbol_dct[name]
        except KeyError:
            raise UnknownSpeciesError(f"Name {name} is not registered", context={"name": name})

    def getSpeciesIndex(self, species_name: str) -> int:
        """Get the index of a species.

        Args:
            species_name (str): Species name
        Returns:
            int: Index of the species
        """
        try:
            return self._species_names.index(species_name)
        except ValueError:
            raise UnknownSpeciesError(f"Species {species_name} not found in species names",
                    context={"name": species_name})

    def getSpeciesName(self, index: int) -> str:
        if not _isIndex(index) or not 0 <= index < len(self._species_names):
            raise IndexOutOfRangeError(f"Index {index} out of range for species names",
                    context={"index": index})
        return self._species_names[index]

    def getParameterIndex(self, parameter_name: str) -> int:
        try:
            return self._parameter_names.index(parameter_name)
        except ValueError:
            raise UnknownSpeciesError(f"Parameter {parameter_name} not found in parameter names",
                    context={"name": parameter_name})

    def getReaction(self, index: int) -> Reaction:
        """Reaction record at the index.

        Raises:
            IndexOutOfRangeError
        """
        if not _isIndex(index) or not 0 <= index < len(self._reactions):
            raise IndexOutOfRangeError(
                f"Reaction index {index} out of range for {len(self._reactions)} reactions",
                context={"index": index})
        return self._reactions[index]

    def substrates(self, index: int) -> Dict[str, int]:
        return dict(self.getReaction(index).substrates)

    def products(self, index: int) -> Dict[str, int]:
        return dict(self.getReaction(index).products)

    def dependents(self, index: int) -> Set[str]:
        """Species whose values the rate law of the reaction reads.
        Always contains the substrates."""
        return set(self.getReaction(index).dependents)

    def netStoichiometry(self, index: int) -> List[Tuple[int, int]]:
        """(species index, product coefficient - substrate coefficient) pairs
        in species order. Species with a net change of zero are omitted."""
        reaction = self.getReaction(index)
        net_dct: Dict[int, int] = {}
        for species_name, coefficient in reaction.products:
            idx = self.getSpeciesIndex(species_name)
            net_dct[idx] = net_dct.get(idx, 0) + coefficient
        for species_name, coefficient in reaction.substrates:
            idx = self.getSpeciesIndex(species_name)
            net_dct[idx] = net_dct.get(idx, 0) - coefficient
        return [(idx, net_dct[idx]) for idx in sorted(net_dct) if net_dct[idx] != 0]

    def rateExpression(self, index: int) -> RateSpec:
        return self.getReaction(index).rate

    def isMassAction(self, index: int) -> bool:
        """True if the rate reads no species and is scaled by the substrates."""
        reaction = self.getReaction(index)
        if reaction.only_use_rate:
            return False
        return not any(n in self._species_names for n in reaction.rate.free_names)

    def copy(self) -> 'ReactionNetwork':
        """Independent copy of the registry."""
        network = ReactionNetwork(name=self.name)
        network._species_names = list(self._species_names)
        network._parameter_names = list(self._parameter_names)
        network._reactions = list(self._reactions)
        network._symbol_dct = dict(self._symbol_dct)
        return network

    def describeReaction(self, index: int) -> str:
        reaction = self.getReaction(index)
        arrow = "=>" if reaction.only_use_rate else "->"
        return (f"{reaction.name}: {_formatSide(reaction.substrates)} {arrow} "
                f"{_formatSide(reaction.products)}; {reaction.rate}")

    def __str__(self) -> str:
        lines = [f"{self.name}: {self.numSpecies()} species, {self.numParameters()} parameters, "
                f"{self.numReactions()} reactions"]
        lines.extend("  " + self.describeReaction(i) for i in range(self.numReactions()))
        return "\n".join(lines)


def _isIndex(index: Any) -> bool:
    return isinstance(index, numbers.Integral) and not isinstance(index, bool)


def _isEntry(entries: Any) -> bool:
    # A bare "A" or ("A", 2) instead of a list of them
    if isinstance(entries, str):
        return True
    return len(entries) == 2 and isinstance(entries[0], str) and not isinstance(entries[1], str)


def _checkCoefficient(species_name: str, coefficient: Any) -> int:
    if isinstance(coefficient, float) and coefficient.is_integer():
        coefficient = int(coefficient)
    if not _isIndex(coefficient) or coefficient <= 0:
        raise MalformedStoichiometryError(
            f"Coefficient of {species_name} must be a positive integer, got {coefficient!r}",
            context={"name": species_name, "coefficient": coefficient})
    return int(coefficient)


def _formatSide(stoichiometry: Tuple[Tuple[str, int], ...]) -> str:
    terms = [n if c == 1 else f"{c} {n}" for n, c in stoichiometry]
    return " + ".join(terms) if terms else "∅"
