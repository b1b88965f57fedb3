"""Peptide sequence helpers."""


def get_primary_sequence(peptide: str) -> str:
    """
    Remove the prefix and suffix residues from a peptide sequence.

    ``K.PEPT*IDE.R`` becomes ``PEPT*IDE``; ``-.PEPTIDE.-`` becomes ``PEPTIDE``.
    Modification symbols inside the sequence are kept.  A sequence without
    a dotted prefix or suffix is returned unchanged.
    """
    sequence = peptide.strip()
    if len(sequence) >= 4 and sequence[1] == "." and sequence[-2] == ".":
        return sequence[2:-2]
    if len(sequence) >= 2 and sequence[1] == ".":
        return sequence[2:]
    if len(sequence) >= 2 and sequence[-2] == ".":
        return sequence[:-2]
    return sequence
