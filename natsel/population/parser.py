"""Parse the initial-population description.

Two values describe the population that the simulation starts with:

mutations: abbreviations of the genes that have already mutated, e.g. "fE".
    Uppercase means the mutant allele is dominant, lowercase means recessive.
    A gene may appear at most once.

population: one or more expressions. Without mutations this is a single positive
    integer, e.g. ["20"]. With mutations each expression is a count followed by a
    genotype that uses 2 letters for each mutated gene, father allele first,
    e.g. ["5FfEe", "10ffee"].

Parsing mutations changes the gene pool: each listed gene gets its initial dominance.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from natsel.errors import PopulationParseError

if TYPE_CHECKING:
    from natsel.genetics.allele import Allele
    from natsel.genetics.gene import Gene, GenePool

logger = logging.getLogger(__name__)

DEFAULT_MUTATIONS = ""
DEFAULT_POPULATION = ("1",)

_EXPRESSION = re.compile(r"^(?P<count>[0-9]*)(?P<genotype>.*)$")


@dataclass(frozen=True)
class BunnyVariety:
    """A group of identical generation-zero bunnies."""

    count: int
    genotype_string: str
    alleles: dict[Gene, tuple[Allele, Allele]] = field(default_factory=dict)


def parse_mutations(gene_pool: GenePool, value: str, parameter: str = "mutations") -> list[str]:
    """Set the initial dominance of each gene listed in value.

    Args:
        gene_pool: Gene pool to configure
        value: Mutation abbreviations, e.g. "Fe"
        parameter: Parameter name used in error messages

    Returns:
        The mutation abbreviations, in the order given

    Raises:
        PopulationParseError: If value contains an unknown letter or names a gene twice
    """
    chars = list(value)
    valid = {
        letter
        for gene in gene_pool.genes
        for letter in (gene.dominant_abbreviation, gene.recessive_abbreviation)
    }
    invalid = [char for char in chars if char not in valid]
    if invalid:
        raise PopulationParseError(parameter, value, f"invalid characters {invalid}")

    dominance: dict[Gene, Allele] = {}
    for gene in gene_pool.genes:
        listed = [c for c in chars if c in (gene.dominant_abbreviation, gene.recessive_abbreviation)]
        if len(listed) > 1:
            raise PopulationParseError(
                parameter, value, f"{gene.name} gene may be listed only once"
            )
        if listed:
            mutant_is_dominant = listed[0] == gene.dominant_abbreviation
            dominance[gene] = gene.mutant_allele if mutant_is_dominant else gene.normal_allele

    # Nothing is applied until the whole value is known to be valid.
    for gene, dominant_allele in dominance.items():
        gene.set_initial_dominance(dominant_allele)

    return chars


def parse_population(
    gene_pool: GenePool,
    value: list[str] | tuple[str, ...],
    mutation_chars: list[str],
    max_population: int,
    parameter: str = "population",
) -> list[BunnyVariety]:
    """Parse population expressions into bunny varieties.

    Must be called after parse_mutations, which sets the dominance that maps
    genotype letters to alleles.

    Raises:
        PopulationParseError: If an expression is malformed, or the total is out of range
    """
    if not mutation_chars:
        if len(value) != 1 or not re.fullmatch(r"[0-9]+", value[0]) or int(value[0]) <= 0:
            raise PopulationParseError(parameter, value, "must be a positive integer")
        return [_create_variety(gene_pool, int(value[0]), "")]

    if not value:
        raise PopulationParseError(parameter, value, "value is required")

    mutated_genes = [
        gene
        for gene in gene_pool.genes
        if gene.dominant_abbreviation in mutation_chars or gene.recessive_abbreviation in mutation_chars
    ]

    varieties = []
    total = 0
    for expression in value:
        match = _EXPRESSION.match(expression)
        count_string, genotype_string = match.group("count"), match.group("genotype")
        if not genotype_string:
            raise PopulationParseError(parameter, expression, "missing a genotype")
        if not count_string or int(count_string) <= 0:
            raise PopulationParseError(parameter, expression, "must start with a positive integer")

        count = int(count_string)
        total += count
        if total >= max_population:
            raise PopulationParseError(
                parameter, value, f"the total population must be < {max_population}"
            )

        _check_genotype(genotype_string, mutated_genes, mutation_chars, parameter)
        varieties.append(_create_variety(gene_pool, count, genotype_string))

    if total <= 0:
        raise PopulationParseError(parameter, value, "the total population must be > 0")
    return varieties


def _check_genotype(
    genotype_string: str, mutated_genes: list[Gene], mutation_chars: list[str], parameter: str
) -> None:
    if len(genotype_string) != 2 * len(mutation_chars):
        raise PopulationParseError(parameter, genotype_string, "invalid genotype")

    # Each mutated gene contributes exactly 2 adjacent letters.
    for gene in mutated_genes:
        letters = (gene.dominant_abbreviation, gene.recessive_abbreviation)
        positions = [i for i, char in enumerate(genotype_string) if char in letters]
        if len(positions) != 2 or positions[1] != positions[0] + 1:
            raise PopulationParseError(
                parameter, genotype_string, f"invalid genotype for {gene.name} gene"
            )


def _create_variety(gene_pool: GenePool, count: int, genotype_string: str) -> BunnyVariety:
    alleles: dict[Gene, tuple[Allele, Allele]] = {}
    for gene in gene_pool.genes:
        slots = [
            gene.allele_for_abbreviation(char)
            for char in genotype_string
            if char in (gene.dominant_abbreviation, gene.recessive_abbreviation)
        ]
        father_allele = slots[0] if slots else gene.normal_allele
        mother_allele = slots[1] if len(slots) > 1 else gene.normal_allele
        alleles[gene] = (father_allele, mother_allele)
    return BunnyVariety(count, genotype_string, alleles)


def parse_initial_population(
    gene_pool: GenePool,
    mutations: str,
    population: list[str] | tuple[str, ...],
    max_population: int,
) -> list[BunnyVariety]:
    """Parse mutations and population, falling back to the defaults if either is invalid.

    On failure the gene pool's initial dominance is reverted before the defaults are
    parsed, so a half-applied mutations value never leaks into the simulation.
    """
    try:
        mutation_chars = parse_mutations(gene_pool, mutations)
        return parse_population(gene_pool, population, mutation_chars, max_population)
    except PopulationParseError as e:
        logger.warning(
            f"Invalid initial population ({e}), using defaults. "
            f"mutations={mutations!r} population={list(population)!r}"
        )
        gene_pool.clear_initial_dominance()
        mutation_chars = parse_mutations(gene_pool, DEFAULT_MUTATIONS)
        return parse_population(gene_pool, list(DEFAULT_POPULATION), mutation_chars, max_population)
