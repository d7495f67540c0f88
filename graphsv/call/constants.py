from ..constants import WeakGraphsvNamespace, float_fraction

DEFAULTS = WeakGraphsvNamespace()
"""
- partition_reciprocal_overlap
- repartition_reciprocal_overlap
- min_event_prob
- max_path_length_factor
- max_edge_visits
- max_branches
- max_breakpoints_per_haplotype
- min_event_size
- min_haplotype_prob
- default_copy_number
- max_non_ref_copies
- max_genotype_combinations
- concurrency_limit
"""
DEFAULTS.add(
    'partition_reciprocal_overlap',
    0.9,
    cast_type=float_fraction,
    defn='minimum reciprocal overlap for nested breakpoint intervals to be solved in the same partition',
)
DEFAULTS.add(
    'repartition_reciprocal_overlap',
    0.1,
    cast_type=float_fraction,
    defn='minimum reciprocal overlap used to split up a partition which was too large to solve',
)
DEFAULTS.add(
    'min_event_prob',
    0.5,
    cast_type=float_fraction,
    defn='minimum integrated probability of an event for it to be called',
)
DEFAULTS.add(
    'max_path_length_factor',
    2.0,
    defn='haplotypes may cover at most this multiple of the reference length of their partition',
)
DEFAULTS.add('max_edge_visits', 2, defn='maximum number of times a single haplotype may visit any one edge')
DEFAULTS.add(
    'max_branches',
    100000,
    defn='maximum number of partial haplotypes held during the search before the partition is considered too large',
)
DEFAULTS.add(
    'max_breakpoints_per_haplotype',
    None,
    cast_type=int,
    nullable=True,
    defn='maximum number of breakpoint edges a single haplotype may use (None for no limit)',
)
DEFAULTS.add('min_event_size', 0, defn='minimum length of a called event after merging')
DEFAULTS.add(
    'min_haplotype_prob',
    0.01,
    cast_type=float_fraction,
    defn='minimum probability for a genotype to be reported',
)
DEFAULTS.add(
    'default_copy_number',
    2,
    defn='baseline copy number of partitions which do not depend on any other partition',
)
DEFAULTS.add(
    'max_non_ref_copies',
    4,
    defn='maximum number of haplotypes combined into a genotype. Additional copies are assumed to follow the reference',
)
DEFAULTS.add(
    'max_genotype_combinations',
    4000000000,
    defn='maximum number of haplotype combinations to score before the partition is considered too large',
)
DEFAULTS.add(
    'concurrency_limit',
    1,
    defn='number of worker processes used to solve independent partitions',
)
