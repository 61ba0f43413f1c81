"""Builds reaction networks from Antimony models and writes networks as SBML and Antimony."""

import reaction_network.constants as cn  # type: ignore
from reaction_network.errors import MalformedRateError  # type: ignore
from reaction_network.network import ReactionNetwork  # type: ignore
from reaction_network.rate_law import makeOdeRateLaw  # type: ignore

import libsbml  # type: ignore
import logging
import sympy as sp  # type: ignore
import tellurium as te  # type: ignore
from typing import Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)


def _readSBMLModel(antimony_str: str) -> libsbml.Model:
    roadrunner = te.loadAntimonyModel(antimony_str)
    sbml_str = roadrunner.getSBML()
    reader = libsbml.SBMLReader()
    document = reader.readSBMLFromString(sbml_str)
    return document.getModel()


def _isBoundary(species: libsbml.Species) -> bool:
    return species.getBoundaryCondition() or species.getConstant()


def _getSpeciesReferences(references, boundary_names: List[str]) -> List[Tuple[str, float]]:
    # Boundary species are not changed by reactions
    return [(r.getSpecies(), r.getStoichiometry()) for r in references
            if r.getSpecies() not in boundary_names]


def makeNetworkFromAntimony(antimony_str: str) -> ReactionNetwork:
    """
    Creates a ReactionNetwork from an Antimony model.
    Kinetic laws are used as complete rate laws. Boundary and constant species
    are registered as parameters. Compartments are registered as parameters
    if a kinetic law reads them.

    Args:
        antimony_str (str): Antimony model string

    Returns:
        ReactionNetwork
    """
    sbml_model = _readSBMLModel(antimony_str)
    name = sbml_model.getId() if sbml_model.getId() else cn.DEFAULT_NETWORK_NAME
    network = ReactionNetwork(name=name)
    #
    all_species = [sbml_model.getSpecies(i) for i in range(sbml_model.getNumSpecies())]
    boundary_names = [s.getId() for s in all_species if _isBoundary(s)]
    for species in all_species:
        if species.getId() not in boundary_names:
            network.addSpecies(species.getId())
    for species_name in boundary_names:
        network.addParameter(species_name)
    species_ids = [s.getId() for s in all_species]
    for i in range(sbml_model.getNumParameters()):
        parameter_id = sbml_model.getParameter(i).getId()
        if parameter_id in species_ids:
            continue
        network.addParameter(parameter_id)
    # Kinetic laws
    sbml_reactions = [sbml_model.getReaction(i) for i in range(sbml_model.getNumReactions())]
    formula_dct: Dict[str, str] = {}
    for reaction in sbml_reactions:
        kinetic_law = reaction.getKineticLaw()
        if kinetic_law is None or kinetic_law.getMath() is None:
            raise MalformedRateError(f"Reaction {reaction.getId()} has no kinetic law",
                    context={"reaction": reaction.getId()})
        math = kinetic_law.getMath().deepCopy()
        _renameTime(math)
        formula_dct[reaction.getId()] = libsbml.formulaToL3String(math)
    compartment_ids = [sbml_model.getCompartment(i).getId()
            for i in range(sbml_model.getNumCompartments())]
    for compartment_id in compartment_ids:
        is_used = any(_readsName(f, compartment_id) for f in formula_dct.values())
        if is_used and compartment_id not in network.parameters():
            network.addParameter(compartment_id)
    # Reactions
    for reaction in sbml_reactions:
        reactants = [reaction.getReactant(j) for j in range(reaction.getNumReactants())]
        products = [reaction.getProduct(j) for j in range(reaction.getNumProducts())]
        network.addReaction(formula_dct[reaction.getId()],
                _getSpeciesReferences(reactants, boundary_names),
                _getSpeciesReferences(products, boundary_names),
                only_use_rate=True, name=reaction.getId())
    logger.info("Read %s: %d species, %d parameters, %d reactions", network.name,
            network.numSpecies(), network.numParameters(), network.numReactions())
    return network


def _readsName(formula: str, name: str) -> bool:
    math = libsbml.parseL3Formula(formula)
    if math is None:
        return False
    ##
    def traverse(node) -> bool:
        if node.isName() and node.getName() == name:
            return True
        return any(traverse(node.getChild(i)) for i in range(node.getNumChildren()))
    ##
    return traverse(math)


def _renameTime(node) -> None:
    # The SBML time csymbol is read as the network time symbol
    if node.getType() == libsbml.AST_NAME_TIME:
        node.setName(cn.TIME_SYMBOL)
    for i in range(node.getNumChildren()):
        _renameTime(node.getChild(i))


def _makeTimeCsymbol(node) -> None:
    if node.getType() == libsbml.AST_NAME and node.getName() == cn.TIME_SYMBOL:
        node.setType(libsbml.AST_NAME_TIME)
    for i in range(node.getNumChildren()):
        _makeTimeCsymbol(node.getChild(i))


def _parseFormula(formula: str):
    # sympy log is the natural logarithm
    settings = libsbml.L3ParserSettings()
    settings.setParseLog(libsbml.L3P_PARSE_LOG_AS_LN)
    math = libsbml.parseL3FormulaWithSettings(formula, settings)
    if math is not None:
        _makeTimeCsymbol(math)
    return math


def _makeFormula(expr: sp.Expr) -> str:
    # SBML L3 infix syntax uses ^ for powers
    return str(expr).replace("**", "^")


def makeSBML(network: ReactionNetwork,
        parameter_dct: Optional[Dict[str, float]] = None,
        initial_dct: Optional[Dict[str, float]] = None,
        combinatoric_ratelaws: bool = True) -> str:
    """Returns the SBML string of the network.

    Args:
        network (ReactionNetwork)
        parameter_dct (dict, optional): parameter values. Missing values are 0.
        initial_dct (dict, optional): initial species concentrations. Missing values are 0.
        combinatoric_ratelaws (bool, optional): used for the mass action kinetic laws

    Returns:
        str: SBML string
    """
    parameter_dct = {} if parameter_dct is None else parameter_dct
    initial_dct = {} if initial_dct is None else initial_dct
    document = libsbml.SBMLDocument(cn.SBML_LEVEL, cn.SBML_VERSION)
    sbml_model = document.createModel()
    sbml_model.setId(network.name)
    used_names = set(network.species()) | set(network.parameters())
    used_names.update(r.name for r in network.reactions())
    compartment_id = cn.DEFAULT_COMPARTMENT
    while compartment_id in used_names:
        compartment_id = f"_{compartment_id}"
    compartment = sbml_model.createCompartment()
    compartment.setId(compartment_id)
    compartment.setConstant(True)
    compartment.setSpatialDimensions(3)
    compartment.setSize(cn.DEFAULT_COMPARTMENT_SIZE)
    for species_name in network.species():
        species = sbml_model.createSpecies()
        species.setId(species_name)
        species.setCompartment(compartment_id)
        species.setBoundaryCondition(False)
        species.setConstant(False)
        species.setHasOnlySubstanceUnits(False)
        species.setInitialConcentration(initial_dct.get(species_name, 0.0))
    for parameter_name in network.parameters():
        parameter = sbml_model.createParameter()
        parameter.setId(parameter_name)
        parameter.setConstant(True)
        parameter.setValue(parameter_dct.get(parameter_name, 0.0))
    for index, reaction in enumerate(network.reactions()):
        sbml_reaction = sbml_model.createReaction()
        sbml_reaction.setId(reaction.name)
        sbml_reaction.setReversible(False)
        sbml_reaction.setFast(False)
        for species_name, coefficient in reaction.substrates:
            reactant = sbml_reaction.createReactant()
            reactant.setSpecies(species_name)
            reactant.setStoichiometry(coefficient)
            reactant.setConstant(True)
        for species_name, coefficient in reaction.products:
            product = sbml_reaction.createProduct()
            product.setSpecies(species_name)
            product.setStoichiometry(coefficient)
            product.setConstant(True)
        modifier_names = reaction.dependents - set(n for n, _ in reaction.substrates)
        for species_name in sorted(modifier_names):
            modifier = sbml_reaction.createModifier()
            modifier.setSpecies(species_name)
        formula = _makeFormula(makeOdeRateLaw(network, index,
                combinatoric_ratelaws=combinatoric_ratelaws))
        math = _parseFormula(formula)
        if math is None:
            raise MalformedRateError(
                f"Cannot write rate law of {reaction.name}: {libsbml.getLastParseL3Error()}",
                context={"reaction": reaction.name, "formula": formula})
        kinetic_law = sbml_reaction.createKineticLaw()
        kinetic_law.setMath(math)
    writer = libsbml.SBMLWriter()
    sbml_str = writer.writeSBMLToString(document)
    logger.info("Wrote SBML for %s", network.name)
    return sbml_str


def makeAntimony(network: ReactionNetwork,
        parameter_dct: Optional[Dict[str, float]] = None,
        initial_dct: Optional[Dict[str, float]] = None,
        combinatoric_ratelaws: bool = True) -> str:
    """Returns the Antimony string of the network.

    Args: see makeSBML

    Returns:
        str: Antimony string
    """
    sbml_str = makeSBML(network, parameter_dct=parameter_dct, initial_dct=initial_dct,
            combinatoric_ratelaws=combinatoric_ratelaws)
    roadrunner = te.loadSBMLModel(sbml_str)
    return roadrunner.getAntimony()
